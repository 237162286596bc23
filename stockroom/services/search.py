"""Tray search - filter and sort the trays of a warehouse."""
import enum
from typing import List, Literal, Set, Union

from pydantic import BaseModel, ConfigDict, Field

from stockroom.layers.tray import Tray
from stockroom.layers.warehouse import Warehouse


class SortBy(str, enum.Enum):
    NONE = "none"
    EXPIRY = "expiry"
    WEIGHT = "weight"
    CATEGORY = "category"
    LOCATION = "location"


class WeightRange(BaseModel):
    """Inclusive weight range in kg."""
    from_: float = Field(0, alias="from", ge=0)
    to: float = Field(..., ge=0)

    model_config = ConfigDict(populate_by_name=True)


class SortQuery(BaseModel):
    type: SortBy = SortBy.NONE
    ascending: bool = True


class SearchQuery(BaseModel):
    """
    Tray search query.
    
    ``categories``: None for all trays, a set of category ids, ``"set"`` for
    any categorised tray or ``"unset"`` for uncategorised trays.
    ``weight``: None for any, ``"set"``, ``"unset"`` or a weight range.
    """
    categories: Union[None, Literal["set", "unset"], Set[str]] = None
    weight: Union[None, Literal["set", "unset"], WeightRange] = None
    sort: SortQuery = Field(default_factory=SortQuery)


def _matches_category(tray: Tray, categories) -> bool:
    if categories is None:
        return True
    has_category = tray.category is not None
    if categories == "set":
        return has_category
    if categories == "unset":
        return not has_category
    return has_category and tray.category_id in categories


def _matches_weight(tray: Tray, weight) -> bool:
    if weight is None:
        return True
    if weight == "set":
        return tray.weight is not None
    if weight == "unset":
        return tray.weight is None
    return tray.weight is not None and weight.from_ <= tray.weight <= weight.to


def _sort_key(tray: Tray, sort_by: SortBy):
    if sort_by == SortBy.EXPIRY:
        expiry = tray.expiry
        if expiry is None or expiry.is_indefinite:
            return None
        return (expiry.from_, expiry.to)
    if sort_by == SortBy.WEIGHT:
        return tray.weight
    if sort_by == SortBy.CATEGORY:
        category = tray.category
        return category.index if category else None
    if sort_by == SortBy.LOCATION:
        return tuple(int(part) for part in tray.location_string.split("_"))
    return None


def search_trays(warehouse: Warehouse, query: SearchQuery) -> List[Tray]:
    """
    Trays of a tray-deep warehouse matching ``query``.
    
    Trays without a value for the sort key go last whichever way the sort runs.
    """
    results = [
        tray for tray in warehouse.trays
        if _matches_category(tray, query.categories) and _matches_weight(tray, query.weight)
    ]
    if query.sort.type == SortBy.NONE:
        return results

    keyed = [(_sort_key(tray, query.sort.type), tray) for tray in results]
    with_key = [item for item in keyed if item[0] is not None]
    without_key = [tray for key, tray in keyed if key is None]
    with_key.sort(key=lambda item: item[0], reverse=not query.sort.ascending)
    return [tray for _, tray in with_key] + without_key
