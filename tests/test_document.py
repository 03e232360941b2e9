import sys, os, json
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
sys.path.insert(0, SRC)

from tealium_mcp.document import format_value, generate_documentation

SPEC = {
    'name': 'Hotel Tracking',
    'version': '1.2',
    'description': 'Booking funnel variables',
    'variables': [
        {'name': 'page.pageName', 'description': 'Page name', 'type': 'string', 'required': True, 'example': 'home'},
        {'name': 'hotel.hotelCategory', 'description': 'Category', 'type': 'string', 'required': False,
         'allowedValues': ['resort', 'city']},
        {'name': 'visitorId', 'description': 'Visitor', 'type': 'string', 'required': True},
    ],
    'events': [
        {'name': 'booking.completed', 'description': 'Booking confirmed', 'trigger': 'Confirmation page',
         'variables': [{'name': 'booking.bookingId', 'description': 'Id', 'type': 'string', 'required': True}]},
    ],
}

def test_markdown_from_spec():
    doc = generate_documentation(spec=SPEC)
    assert doc.startswith('# Hotel Tracking')
    assert '**Version:** 1.2' in doc
    assert '| `page.pageName` | string | ✅ | Page name |' in doc
    assert '- **Example:** `"home"`' in doc
    assert '- **Allowed values:** `resort`, `city`' in doc
    assert '### booking.completed' in doc
    assert '**Trigger:** Confirmation page' in doc

def test_json_schema_from_spec():
    schema = json.loads(generate_documentation(spec=SPEC, format='json-schema'))
    assert schema['$schema'] == 'http://json-schema.org/draft-07/schema#'
    assert schema['properties']['page']['properties']['pageName']['type'] == 'string'
    assert schema['properties']['hotel']['properties']['hotelCategory']['enum'] == ['resort', 'city']
    assert schema['required'] == ['visitorId']

def test_markdown_from_data_layer():
    dl = {'page': {'pageName': 'home', 'pageTitle': 'x' * 40}, 'user': {'isLoggedIn': False, 'loyaltyPoints': 120.0}}
    doc = generate_documentation(data_layer=dl)
    assert '## Page Data' in doc
    assert '| `page.pageName` | string | "home" |' in doc
    assert '"' + 'x' * 30 + '..."' in doc
    assert '| `user.isLoggedIn` | boolean | false |' in doc
    assert '| `user.loyaltyPoints` | number | 120 |' in doc
    assert 'window.utag_data = {' in doc
    assert 'does not match' not in doc

def test_shape_note_for_broken_section():
    doc = generate_documentation(data_layer={'page': {'pageType': 'home'}})
    assert 'section `page` does not match the expected Tealium shape' in doc

def test_inferred_json_schema():
    schema = json.loads(generate_documentation(data_layer={'products': [{'productId': 'p'}], 'x': None}, format='json-schema'))
    assert schema['type'] == 'object'
    assert schema['properties']['products']['items']['properties']['productId'] == {'type': 'string'}
    assert schema['properties']['x'] == {'type': 'null'}

def test_nothing_to_document():
    assert generate_documentation() == 'No data layer or specification provided'

def test_format_value():
    assert format_value(None) == '*empty*'
    assert format_value({'a': 1}) == '*object*'
    assert format_value(3) == '3'
