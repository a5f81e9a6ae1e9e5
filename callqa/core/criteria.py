from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Tuple

from callqa.core.errors import ConfigurationError
from callqa.core.models import EvaluationParameter, ParameterType


class CriteriaRegistry:
    """Ordered, read-only set of evaluation parameters.

    The same instance drives both the rubric sent to the scoring service and the
    validation of its answer, so the two can never disagree.
    """

    __slots__ = ("_params", "_by_key")

    def __init__(self, params: Iterable[EvaluationParameter]) -> None:
        items: Tuple[EvaluationParameter, ...] = tuple(params)
        if not items:
            raise ConfigurationError("Criteria registry must contain at least one parameter")

        by_key: Dict[str, EvaluationParameter] = {}
        for p in items:
            if p.key in by_key:
                raise ConfigurationError(f"Duplicate criteria key: {p.key}")
            if isinstance(p.weight, bool) or not isinstance(p.weight, int) or p.weight <= 0:
                raise ConfigurationError(f"Criteria weight must be a positive integer: {p.key}")
            by_key[p.key] = p

        object.__setattr__(self, "_params", items)
        object.__setattr__(self, "_by_key", by_key)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("CriteriaRegistry is immutable")

    def __iter__(self) -> Iterator[EvaluationParameter]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    @property
    def parameters(self) -> Tuple[EvaluationParameter, ...]:
        return self._params

    @property
    def keys(self) -> List[str]:
        return [p.key for p in self._params]

    def get(self, key: str) -> EvaluationParameter:
        return self._by_key[key]

    def total_weight(self) -> int:
        return sum(p.weight for p in self._params)


def registry_from_config(raw_criteria: List[Dict[str, Any]]) -> CriteriaRegistry:
    params = []
    for c in raw_criteria:
        try:
            param_type = ParameterType(str(c.get("type", ParameterType.SCORE.value)).upper())
            params.append(
                EvaluationParameter(
                    name=str(c["name"]),
                    key=str(c["key"]),
                    type=param_type,
                    weight=c["weight"],
                    description=str(c.get("description", "")),
                )
            )
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(f"Invalid criteria entry {c!r}: {exc}") from exc
    return CriteriaRegistry(params)


EVALUATION_PARAMETERS: Tuple[EvaluationParameter, ...] = (
    EvaluationParameter(
        name="Greeting",
        key="greeting",
        type=ParameterType.SCORE,
        weight=5,
        description="Agent greets the customer warmly and professionally",
    ),
    EvaluationParameter(
        name="Collection Urgency",
        key="collectionUrgency",
        type=ParameterType.SCORE,
        weight=12,
        description="Agent conveys urgency to pay and potential consequences",
    ),
    EvaluationParameter(
        name="Customer Verification",
        key="customerVerification",
        type=ParameterType.PASS_FAIL,
        weight=10,
        description="Agent verifies customer identity before discussing account details",
    ),
    EvaluationParameter(
        name="Active Listening",
        key="activeListening",
        type=ParameterType.SCORE,
        weight=8,
        description="Agent demonstrates understanding of customer concerns and responds appropriately",
    ),
    EvaluationParameter(
        name="Empathy",
        key="empathy",
        type=ParameterType.SCORE,
        weight=8,
        description="Agent shows understanding and compassion for customer situation",
    ),
    EvaluationParameter(
        name="Payment Options Explained",
        key="paymentOptions",
        type=ParameterType.SCORE,
        weight=10,
        description="Agent clearly explains available payment options and terms",
    ),
    EvaluationParameter(
        name="Objection Handling",
        key="objectionHandling",
        type=ParameterType.SCORE,
        weight=12,
        description="Agent effectively addresses customer objections and concerns",
    ),
    EvaluationParameter(
        name="Compliance Disclosure",
        key="complianceDisclosure",
        type=ParameterType.PASS_FAIL,
        weight=15,
        description=(
            "Agent provides required legal disclosures "
            "(e.g., call recording notice, debt collection notice)"
        ),
    ),
    EvaluationParameter(
        name="Call Control",
        key="callControl",
        type=ParameterType.SCORE,
        weight=8,
        description="Agent maintains control of conversation and guides toward resolution",
    ),
    EvaluationParameter(
        name="Commitment Secured",
        key="commitmentSecured",
        type=ParameterType.PASS_FAIL,
        weight=10,
        description="Agent obtains a clear payment commitment from customer",
    ),
    EvaluationParameter(
        name="Professional Closing",
        key="professionalClosing",
        type=ParameterType.SCORE,
        weight=5,
        description="Agent closes call professionally with clear next steps",
    ),
)

DEFAULT_REGISTRY = CriteriaRegistry(EVALUATION_PARAMETERS)
