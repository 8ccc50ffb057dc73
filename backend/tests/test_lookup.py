from workflow.lookup import find_by_code, normalize_code

from tests.conftest import make_item


def test_normalize_code_trims_and_ignores_case():
    assert normalize_code("  flt-001 ") == "flt-001"
    assert normalize_code("FLT-001") == normalize_code("flt-001")
    assert normalize_code(None) == ""


def test_find_by_code_matches_case_insensitively(catalog):
    assert find_by_code(catalog, " flt-001 ").id == 1
    assert find_by_code(catalog, "PAS-220").id == 2


def test_find_by_code_is_exact_not_prefix(catalog):
    assert find_by_code(catalog, "FLT") is None
    assert find_by_code(catalog, "FLT-0011") is None


def test_blank_code_never_matches():
    catalog = [make_item(1, "", "Sem código")]
    assert find_by_code(catalog, "") is None
    assert find_by_code(catalog, "   ") is None


def test_first_match_wins_when_codes_collide():
    catalog = [make_item(1, "ABC", "Primeiro"), make_item(2, "abc", "Segundo")]
    assert find_by_code(catalog, "Abc").id == 1
