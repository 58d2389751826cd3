from kosztorys.headers import (
    LABEL_CIRCUMFERENCE,
    LABEL_GROSS,
    LABEL_NET,
    LABEL_ORDINAL,
    LABEL_SPECIES,
    LABEL_TREATMENT,
    is_header_row,
    rename_headers,
)
from kosztorys.models import ColumnRoles

HEADERS = ["Lp.", "Gatunek", "Obwód [cm]", "Zabiegi"]


def test_keyword_scan_detects_repeated_header_line():
    assert is_header_row(["Lp.", "Gatunek", "Obwód", "Zabiegi pielęgnacyjne"])
    assert is_header_row(["Nr inw.", "Wartość netto", "", ""])


def test_two_keywords_need_an_ordinal_marker():
    assert is_header_row(["Lp", "Kod"])
    assert not is_header_row(["Zabieg", "Kod"])


def test_data_rows_are_not_headers():
    assert not is_header_row(["1", "Dąb szypułkowy", "120", "CS"], HEADERS)
    assert not is_header_row(["3", "Lipa drobnolistna", "—", "2x W4t KU"], HEADERS)
    assert not is_header_row([], HEADERS)


def test_reference_comparison_ignores_case_and_punctuation():
    reference = ["Drzewo", "Wysokość, m", "Stan"]
    assert is_header_row(["drzewo", "wysokość m", "STAN."], reference)


def test_reference_comparison_scores_containment():
    reference = ["Gatunek drzewa", "Opis stanu", "Uwagi"]
    assert is_header_row(["gatunek", "opis", ""], reference)


def test_reference_comparison_skips_positions_blank_on_both_sides():
    reference = ["Drzewo", "", "", "Stan"]
    assert is_header_row(["drzewo", "", "", "x"], reference) is False
    assert is_header_row(["drzewo", "", "", "stan"], reference) is True


def test_reference_ratio_must_exceed_half():
    assert not is_header_row(["Lp", "Uwagi"], HEADERS)


def test_rename_headers_uses_canonical_labels():
    renamed = rename_headers(HEADERS, ColumnRoles(circumference=2, treatment=3))

    assert renamed == [
        LABEL_ORDINAL,
        LABEL_SPECIES,
        LABEL_CIRCUMFERENCE,
        LABEL_TREATMENT,
        LABEL_NET,
        LABEL_GROSS,
    ]
    assert HEADERS == ["Lp.", "Gatunek", "Obwód [cm]", "Zabiegi"]


def test_rename_headers_is_idempotent():
    roles = ColumnRoles(circumference=2, treatment=3)
    once = rename_headers(HEADERS, roles)
    assert rename_headers(once, roles) == once


def test_rename_headers_leaves_unrecognised_leading_columns():
    renamed = rename_headers(["Nazwa", "Wysokość", "Obwód", "Zabiegi"], ColumnRoles(2, 3))
    assert renamed[0] == "Nazwa"
    assert renamed[1] == "Wysokość"


def test_species_column_not_renamed_when_it_holds_a_role():
    renamed = rename_headers(["", "", "Zabiegi"], ColumnRoles(circumference=1, treatment=2))
    assert renamed[0] == LABEL_ORDINAL
    assert renamed[1] == LABEL_CIRCUMFERENCE


def test_rename_headers_keeps_empty_header_list_empty():
    assert rename_headers([], ColumnRoles(0, 1)) == []
