from __future__ import annotations

import random
from datetime import datetime, timezone

from covidchart.ingestion.rows import Record
from covidchart.transform.aggregate import CDR, Entity, fold, tree_to_payload


def _ts(hour: int) -> datetime:
    return datetime(2020, 3, 1, hour, 0, tzinfo=timezone.utc)


def _assert_additive(entity: Entity) -> None:
    if not entity.children:
        return
    total = CDR()
    for child in entity.children.values():
        _assert_additive(child)
        total = total.plus(child.cdr)
    assert entity.cdr == total


RECORDS = [
    Record("Mainland China", "Hubei", confirmed=100, deaths=5, recovered=10, last_update=_ts(1)),
    Record("Mainland China", "Beijing", confirmed=20, deaths=1, recovered=2, last_update=_ts(3)),
    Record("Hong Kong", confirmed=7, deaths=0, recovered=1, last_update=_ts(2)),
    Record("US", "New York", "Kings", confirmed=30, deaths=2),
    Record("US", "New York", "Queens", confirmed=12, deaths=1),
    Record("US", "Washington", "King", confirmed=9),
    Record("Italy", confirmed=50, deaths=3, recovered=4, latitude=41.9, longitude=12.6),
]


def test_mainland_china_and_hong_kong_fold_into_china() -> None:
    tree = fold(RECORDS)
    assert "Mainland China" not in tree
    assert "Hong Kong" not in tree
    china = tree["China"]
    assert set(china.children) == {"Beijing", "Hong Kong", "Hubei"}
    assert china.cdr == CDR(127, 6, 13)
    assert china.children["Hong Kong"].cdr == CDR(7, 0, 1)


def test_every_parent_is_the_sum_of_its_children() -> None:
    tree = fold(RECORDS)
    for entity in tree.values():
        _assert_additive(entity)
    us = tree["US"]
    assert us.children["New York"].cdr == CDR(42, 3, 0)
    assert set(us.children["New York"].children) == {"Kings", "Queens"}
    assert us.cdr == CDR(51, 3, 0)


def test_result_does_not_depend_on_row_order() -> None:
    expected = tree_to_payload(fold(RECORDS))
    shuffled = list(RECORDS)
    for seed in range(5):
        random.Random(seed).shuffle(shuffled)
        assert tree_to_payload(fold(shuffled)) == expected


def test_country_rows_beside_province_rows_become_their_own_child() -> None:
    tree = fold(
        [
            Record("France", confirmed=100, deaths=2),
            Record("France", "Reunion", confirmed=5),
            Record("Reunion", confirmed=3),
        ]
    )
    france = tree["France"]
    assert france.cdr == CDR(108, 2, 0)
    assert france.children["France"].cdr == CDR(100, 2, 0)
    assert france.children["Reunion"].cdr == CDR(8, 0, 0)


def test_leaf_keeps_latest_update_and_agreeing_coordinates() -> None:
    tree = fold(
        [
            Record("Japan", confirmed=1, last_update=_ts(4), latitude=36.0, longitude=138.0),
            Record("Japan", confirmed=2, last_update=_ts(9), latitude=36.0, longitude=138.0),
            Record("Spain", confirmed=1, latitude=40.0, longitude=-4.0),
            Record("Spain", confirmed=1, latitude=40.5, longitude=-3.7),
        ]
    )
    japan = tree["Japan"]
    assert japan.confirmed == 3
    assert japan.last_update == _ts(9)
    assert (japan.latitude, japan.longitude) == (36.0, 138.0)
    spain = tree["Spain"]
    assert spain.latitude is None and spain.longitude is None


def test_payload_shape() -> None:
    payload = tree_to_payload(fold(RECORDS))
    assert list(payload) == sorted(payload)
    italy = payload["Italy"]
    assert italy == {
        "confirmed": 50,
        "deaths": 3,
        "recovered": 4,
        "latitude": 41.9,
        "longitude": 12.6,
    }
    hubei = payload["China"]["children"]["Hubei"]
    assert hubei["last_update"] == int(_ts(1).timestamp())
    assert "children" not in hubei


def test_empty_input() -> None:
    assert fold([]) == {}
