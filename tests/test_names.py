from __future__ import annotations

import pytest

from covidchart.transform.names import (
    COUNTRY_RENAMES,
    REGION_FOLDS,
    canonicalize,
    folded_region,
)

KNOWN_NAMES = sorted(set(COUNTRY_RENAMES) | set(REGION_FOLDS) | set(COUNTRY_RENAMES.values()) | set(REGION_FOLDS.values()))


@pytest.mark.parametrize("raw", KNOWN_NAMES + ["Italy", "US", "", "  Japan  "])
def test_canonicalize_is_idempotent(raw: str) -> None:
    once = canonicalize(raw)
    assert canonicalize(once) == once


@pytest.mark.parametrize(
    "raw",
    ["Mainland China", "Hong Kong", "Hong Kong SAR", "Macau", "Macao SAR", "China"],
)
def test_china_spellings_fold_to_china(raw: str) -> None:
    assert canonicalize(raw) == "China"


def test_overseas_departments_fold_to_sovereign() -> None:
    assert canonicalize("French Guiana") == "France"
    assert canonicalize("Reunion") == "France"
    assert canonicalize("Channel Islands") == "United Kingdom"
    assert canonicalize("Faroe Islands") == "Denmark"


def test_renames_and_singletons() -> None:
    assert canonicalize("UK") == "United Kingdom"
    assert canonicalize("Swaziland") == canonicalize("Kingdom of Eswatini") == "Eswatini"
    assert canonicalize("Ivory Coast") == canonicalize("Côte d'Ivoire") == "Cote d'Ivoire"
    assert canonicalize("Republic of Korea") == "Korea, South"
    assert canonicalize("Taiwan") == "Taiwan*"


def test_unknown_names_pass_through_trimmed() -> None:
    assert canonicalize("Atlantis") == "Atlantis"
    assert canonicalize(" Italy ") == "Italy"


def test_folded_region_only_for_folds() -> None:
    assert folded_region("Hong Kong") == "Hong Kong"
    assert folded_region(" Macau ") == "Macau"
    assert folded_region("Mainland China") is None
    assert folded_region("Italy") is None


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        REGION_FOLDS["Atlantis"] = "Greece"  # type: ignore[index]
