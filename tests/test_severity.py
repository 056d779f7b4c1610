import pytest
from faultline.models.schemas import Severity, Tier
from faultline.services.severity import SEVERITY_TABLE, classify, severity_for_warning, tier_prefix

KNOWN_TIERS = {Tier.NOTICE, Tier.WARNING, Tier.ERROR, Tier.CRITICAL}


@pytest.mark.parametrize('code', list(SEVERITY_TABLE))
def test_recognized_codes_map_to_known_tier(code):
    info = classify(code)
    assert info.tier in KNOWN_TIERS
    assert info.label
    assert classify(code) == info


def test_table_covers_every_single_bit_code():
    singles = [s for s in Severity if s != Severity.ALL]
    assert set(SEVERITY_TABLE) == set(singles)


def test_spot_checks():
    assert classify(Severity.ERROR).tier == Tier.CRITICAL
    assert classify(Severity.PARSE).tier == Tier.ERROR
    assert classify(Severity.USER_ERROR).tier == Tier.ERROR
    assert classify(Severity.CORE_WARNING).tier == Tier.WARNING
    assert classify(Severity.USER_DEPRECATED).tier == Tier.NOTICE
    assert classify(Severity.WARNING).label == 'Warning'


def test_unknown_code_falls_back_to_unknown_tier():
    info = classify(3)
    assert info.tier == Tier.UNKNOWN
    assert info.label == 'Unknown Error (3)'
    assert tier_prefix(info.tier) == '‼Unknown Error: '


def test_tier_prefixes():
    assert tier_prefix(Tier.CRITICAL) == tier_prefix(Tier.ERROR) == '‼Fatal Error: '
    assert tier_prefix(Tier.WARNING) == '⚠️Warning: '
    assert tier_prefix(Tier.NOTICE) == '⚠️Notice: '


@pytest.mark.parametrize('category,expected', [
    (DeprecationWarning, Severity.DEPRECATED),
    (PendingDeprecationWarning, Severity.DEPRECATED),
    (FutureWarning, Severity.USER_DEPRECATED),
    (SyntaxWarning, Severity.COMPILE_WARNING),
    (ImportWarning, Severity.CORE_WARNING),
    (ResourceWarning, Severity.NOTICE),
    (UserWarning, Severity.USER_WARNING),
    (RuntimeWarning, Severity.WARNING),
    (BytesWarning, Severity.WARNING),
])
def test_warning_categories(category, expected):
    assert severity_for_warning(category) == expected
