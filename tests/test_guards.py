import sys, os
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
sys.path.insert(0, SRC)

from tealium_mcp.guards import (
    UNDEFINED, has, is_number, is_record, is_string_array, is_page_data, is_booking_data,
    is_product_data_array, data_layer_shape_error, is_data_layer, is_tracking_spec,
)

def test_primitive_predicates():
    assert is_record({}) and not is_record([]) and not is_record(None)
    assert is_number(3) and is_number(2.5)
    assert not is_number(True)
    assert not is_number(float('nan'))
    assert is_string_array(['a', 'b']) and not is_string_array(['a', 1])

def test_has_treats_undefined_as_missing():
    assert has({'a': None}, 'a')
    assert not has({'a': UNDEFINED}, 'a')
    assert not has({}, 'a')
    assert not has('not a dict', 'a')
    assert repr(UNDEFINED) == 'UNDEFINED' and not UNDEFINED

def test_section_predicates():
    assert is_page_data({'pageName': 'home'})
    assert not is_page_data({'pageType': 'home'})
    booking = {
        'bookingCheckIn': '2024-03-10', 'bookingCheckOut': '2024-03-15', 'bookingCurrency': 'EUR',
        'bookingNights': 5, 'bookingAdults': 2, 'bookingRooms': 1, 'bookingTotal': 500,
    }
    assert is_booking_data(booking)
    assert not is_booking_data(dict(booking, bookingTotal='500'))
    assert is_product_data_array([{'productId': 'p1', 'productName': 'Room'}])
    assert not is_product_data_array([{'productId': 'p1'}])

def test_data_layer_shape():
    assert data_layer_shape_error([]) == '/'
    assert data_layer_shape_error({'page': {'pageName': 'x'}}) is None
    assert data_layer_shape_error({'page': {'pageType': 'x'}}) == 'page'
    assert is_data_layer({'custom': 1})

def test_tracking_spec_predicate():
    spec = {
        'name': 'Spec',
        'variables': [{'name': 'page.pageName', 'description': 'd', 'type': 'string', 'required': True}],
        'events': [],
    }
    assert is_tracking_spec(spec)
    assert not is_tracking_spec(dict(spec, events=None))
    bad = dict(spec, variables=[{'name': 'x', 'description': 'd', 'type': 'date', 'required': True}])
    assert not is_tracking_spec(bad)
