from petverse.core.types import colorize_type_text, format_types, rich_type_style, strip_ansi, type_abbreviation


def test_type_abbreviations_primary():
    assert type_abbreviation('fire') == 'FIR'
    assert type_abbreviation('EARTH') == 'ERT'
    assert type_abbreviation('metal') == 'MET'


def test_format_types_dual():
    out = format_types(('fire', 'air'))
    plain = strip_ansi(out)
    assert plain == 'FIR/AIR'


def test_unknown_type_left_uncolored():
    assert colorize_type_text('metal', 'MET') == 'MET'
    assert rich_type_style('metal') == ''
    assert rich_type_style('Water') == '#6390F0'
