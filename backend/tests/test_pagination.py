import pytest

from unconv import models
from unconv.pagination import PageRequest, build_page, normalize_sort_dir, resolve_sort_column, total_pages
from unconv.problems import ValidationFailed


def test_total_pages_rounds_up():
    assert total_pages(0, 10) == 0
    assert total_pages(1, 10) == 1
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2


def test_single_page_is_first_and_last():
    page = build_page(['a', 'b', 'c'], 3, PageRequest(page=1, size=10))
    assert page.total_pages == 1
    assert page.is_first and page.is_last
    assert not page.has_next and not page.has_previous


def test_middle_page_metadata():
    page = build_page(['d', 'e'], 6, PageRequest(page=2, size=2))
    assert page.page_number == 2
    assert page.total_pages == 3
    assert not page.is_first and not page.is_last
    assert page.has_next and page.has_previous


def test_empty_collection_has_zero_pages():
    page = build_page([], 0, PageRequest())
    assert page.total_pages == 0
    assert page.is_first is True
    assert page.is_last is True
    assert page.has_next is False
    assert page.has_previous is False


def test_page_past_the_end_is_last():
    page = build_page([], 3, PageRequest(page=5, size=10))
    assert page.is_last is True
    assert page.has_next is False
    assert page.has_previous is True


def test_page_result_serializes_camel_case():
    body = build_page([], 0, PageRequest()).model_dump(by_alias=True)
    assert set(body) == {
        'data', 'totalElements', 'pageNumber', 'totalPages',
        'isFirst', 'isLast', 'hasNext', 'hasPrevious',
    }


@pytest.mark.parametrize('value, expected', [
    ('asc', 'asc'),
    ('desc', 'desc'),
    ('DESC', 'desc'),
    (' Desc ', 'desc'),
    ('sideways', 'asc'),
    ('', 'asc'),
    (None, 'asc'),
])
def test_sort_dir_falls_back_to_ascending(value, expected):
    assert normalize_sort_dir(value) == expected


def test_offset_is_derived_from_one_based_page():
    assert PageRequest(page=1, size=10).offset == 0
    assert PageRequest(page=3, size=10).offset == 20


def test_resolve_sort_column_accepts_wire_and_attribute_names():
    assert resolve_sort_column(models.FruitProduct, 'costPrice') is models.FruitProduct.cost_price
    assert resolve_sort_column(models.FruitProduct, 'cost_price') is models.FruitProduct.cost_price


def test_resolve_sort_column_rejects_unknown_property():
    with pytest.raises(ValidationFailed) as exc_info:
        resolve_sort_column(models.Heater, 'colour')
    assert exc_info.value.violations[0].field == 'sortBy'
