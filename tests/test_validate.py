import sys, os
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
sys.path.insert(0, SRC)

from tealium_mcp.validate import validate_data_layer

CLEAN = {
    'page': {'pageName': 'home', 'pageType': 'home', 'currency': 'USD', 'language': 'en-US'},
    'user': {'visitorId': 'v-1'},
}

NOISY = {
    'page': {'pageName': 'home', 'currency': 'usd', 'Page_Title': 'Home'},
    'booking': {'bookingCheckIn': '2024-03-10', 'bookingCheckOut': '2024-03-15', 'bookingNights': 4},
}

def test_clean_document_is_valid():
    res = validate_data_layer(CLEAN)
    assert res.is_valid is True
    assert res.warnings == []
    assert res.summary == 'Data layer is valid with no warnings'

def test_valid_iff_no_errors():
    for doc in (CLEAN, NOISY, {}, {'page': {'pageName': 42}}):
        for strict in (False, True):
            res = validate_data_layer(doc, strict_mode=strict)
            assert res.is_valid == (len(res.errors) == 0)

def test_warnings_only():
    res = validate_data_layer({'page': {'pageName': 'home'}, 'user': {'visitorId': 'v', 'Login_State': 'x'}})
    assert res.is_valid is True
    assert res.summary == 'Data layer is valid with 1 warning(s)'

def test_currency_warning_path():
    res = validate_data_layer(NOISY)
    assert 'page.currency' in [w.path for w in res.warnings]
    assert [w.path for w in res.warnings].count('booking.bookingNights') == 1

def test_strict_mode_promotes_warnings():
    lax = validate_data_layer(NOISY)
    strict = validate_data_layer(NOISY, strict_mode=True)
    assert strict.warnings == []
    lax_errors = [(e.path, e.message) for e in lax.errors]
    strict_errors = [(e.path, e.message) for e in strict.errors]
    assert set(lax_errors) <= set(strict_errors)
    assert len(strict_errors) == len(lax_errors) + len(lax.warnings)
    promoted = [e for e in strict.errors if e.path == 'booking.bookingNights']
    assert promoted[0].expected == 'Set bookingNights to 5'

def test_unknown_schema():
    res = validate_data_layer(CLEAN, 'tealium://schema/unknown')
    assert res.is_valid is False
    assert len([e for e in res.errors if 'Schema not found' in e.message]) == 1

def test_non_object_input():
    for value in (None, [], 'utag_data', 3):
        res = validate_data_layer(value)
        assert res.is_valid is False
        assert len(res.errors) == 1
        assert res.errors[0].path == '/'
        assert res.summary == 'Validation failed: data layer is not an object'

def test_wire_shape():
    wire = validate_data_layer({'page': {'pageName': ''}}).to_wire()
    assert set(wire) == {'isValid', 'errors', 'warnings', 'suggestions', 'summary'}
    assert wire['errors'][0]['path'] == 'page.pageName'
