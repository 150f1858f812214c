from __future__ import annotations

from typing import Any, Iterable, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict

from .document import Document
from .utils import same_value, stringify

MatchOption = Literal["beginsWith", "endsWith", "contains"]


class AttributeCriterion(BaseModel):
    """
    One `{name, value, opt?}` predicate. With no `opt`, values are compared as
    text; `opt` selects prefix, suffix or substring comparison on that text.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: Any = None
    opt: MatchOption | None = None

    def matches(self, document: Document) -> bool:
        if not document.has_property(self.name):
            return False
        actual = stringify(document.get_property(self.name))
        expected = stringify(self.value)
        if self.opt is None:
            return actual == expected
        if self.opt == "beginsWith":
            return actual.startswith(expected)
        if self.opt == "endsWith":
            return actual.endswith(expected)
        return expected in actual

    def matches_exactly(self, document: Document) -> bool:
        # Native-value equality; `opt` is not consulted.
        if not document.has_property(self.name):
            return False
        return same_value(document.get_property(self.name), self.value)


CriterionLike = Union[AttributeCriterion, Mapping[str, Any]]


def parse_criteria(criteria: Iterable[CriterionLike]) -> list[AttributeCriterion]:
    parsed: list[AttributeCriterion] = []
    for criterion in criteria:
        if isinstance(criterion, AttributeCriterion):
            parsed.append(criterion)
        else:
            parsed.append(AttributeCriterion.model_validate(dict(criterion)))
    return parsed
