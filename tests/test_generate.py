import sys, os
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
sys.path.insert(0, SRC)

from tealium_mcp.generate import event_function_name, generate_code

SPEC = {
    'name': 'Hotel Tracking',
    'variables': [
        {'name': 'page.pageName', 'description': 'Page name', 'type': 'string', 'required': True},
        {'name': 'booking.bookingTotal', 'description': 'Total', 'type': 'number', 'required': False},
    ],
    'events': [
        {'name': 'booking.completed', 'description': 'Booking confirmed', 'trigger': 'Confirmation page',
         'variables': [{'name': 'booking.bookingId', 'description': 'Id', 'type': 'string', 'required': True}]},
        {'name': 'page_view', 'description': 'Page view', 'trigger': 'Load', 'variables': []},
    ],
}

def test_event_function_name():
    assert event_function_name('booking.completed') == 'trackBookingCompleted'
    assert event_function_name('Room_Selected') == 'trackRoomSelected'

def test_typescript_from_spec():
    code = generate_code(spec=SPEC)
    assert code.language == 'typescript'
    assert code.filename == 'data-layer.ts'
    assert 'export interface PageData {' in code.code
    assert '  pageName: string;' in code.code
    assert '  bookingTotal?: number;' in code.code
    assert "export type EventName = 'booking.completed' | 'page_view';" in code.code
    assert 'export function trackBookingCompleted(params: {' in code.code
    assert "  trackEvent('page_view');" in code.code
    assert 'export function updateDataLayer(' in code.code

def test_javascript_without_helpers():
    code = generate_code(spec=SPEC, language='javascript', include_helpers=False)
    assert code.filename == 'data-layer.js'
    assert 'interface' not in code.code
    assert 'function trackEvent(' not in code.code
    assert 'function trackBookingCompleted(params) {' in code.code

def test_from_data_layer():
    dl = {'page': {'pageName': 'home', 'tags': ['a']}, 'debug': True}
    code = generate_code(data_layer=dl)
    assert 'export interface PageData {' in code.code
    assert '  tags?: string[];' in code.code
    assert '  debug?: boolean;' in code.code
    assert '"pageName": "home"' in code.code
    assert 'export function trackEvent(' in code.code

def test_invalid_spec_falls_back_to_data_layer():
    code = generate_code(spec={'name': 'broken'}, data_layer={'page': {'pageName': 'x'}})
    assert 'window.utag_data = {' in code.code

def test_nothing_given():
    code = generate_code(language='javascript')
    assert code.code == '// No specification or data layer provided'
    assert code.language == 'javascript'
