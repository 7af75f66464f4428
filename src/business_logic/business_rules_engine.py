"""
Business Rules Engine for Maintenance Prioritization

Derives the human-readable justification attached to each ranked equipment.
Rules are independent (predicate, message template) pairs evaluated in order.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Iterable, List, Optional
import logging
import re
import string

logger = logging.getLogger(__name__)

STABLE_REASON = "Stable"
REASON_SEPARATOR = " | "

FIXED_POINT_SPEC = re.compile(r'\.(\d+)f')


class HalfUpFormatter(string.Formatter):
    """str.format where fixed-point float fields round half away from zero"""

    def format_field(self, value: Any, format_spec: str) -> str:
        match = FIXED_POINT_SPEC.fullmatch(format_spec)
        if match and isinstance(value, float):
            step = Decimal(1).scaleb(-int(match.group(1)))
            value = Decimal(value).quantize(step, rounding=ROUND_HALF_UP)
        return super().format_field(value, format_spec)


MESSAGE_FORMATTER = HalfUpFormatter()


@dataclass(frozen=True)
class JustificationRule:
    """Business rule definition"""
    rule_id: str
    condition: Callable[[Any], bool]   # Predicate over raw equipment metrics
    message: str                       # str.format template over the same metrics
    is_active: bool = True

    def matches(self, metrics: Any) -> bool:
        return self.is_active and bool(self.condition(metrics))

    def render(self, metrics: Any) -> str:
        return MESSAGE_FORMATTER.format(self.message, **vars(metrics))


DEFAULT_RULES: List[JustificationRule] = [
    JustificationRule(
        rule_id='high_frequency',
        condition=lambda m: m.frequency_annual >= 2,
        message="High frequency ({frequency_annual:.1f}/year)",
    ),
    JustificationRule(
        rule_id='high_downtime',
        condition=lambda m: m.avg_downtime_days > 30,
        message="High downtime ({avg_downtime_days:.0f} days)",
    ),
    JustificationRule(
        rule_id='worsening_trend',
        condition=lambda m: m.trend_6m > 0,
        message="Worsening trend (+{trend_6m})",
    ),
    JustificationRule(
        rule_id='maintenance_gap',
        condition=lambda m: m.days_since_last_order > 365,
        message="No maintenance for {days_since_last_order} days",
    ),
    JustificationRule(
        rule_id='unpredictable',
        condition=lambda m: m.variability > 0.7,
        message="Unpredictable",
    ),
]


class JustificationEngine:
    """Evaluates the ordered rule list against equipment metrics"""

    def __init__(self,
                 rules: Optional[Iterable[JustificationRule]] = None,
                 separator: str = REASON_SEPARATOR,
                 fallback: str = STABLE_REASON):
        """Initialize the engine

        Args:
            rules: Ordered rules, defaults to DEFAULT_RULES
            separator: String joining matched reasons
            fallback: Single reason emitted when no rule matches
        """
        self.rules = list(DEFAULT_RULES if rules is None else rules)
        self.separator = separator
        self.fallback = fallback

    def add_rule(self, rule: JustificationRule):
        """Append a rule after the existing ones"""
        if any(existing.rule_id == rule.rule_id for existing in self.rules):
            raise ValueError(f"Duplicate rule id: {rule.rule_id}")
        self.rules.append(rule)
        logger.debug(f"Registered justification rule {rule.rule_id}")

    def reasons(self, metrics: Any) -> List[str]:
        """Messages of every matching rule, in rule order"""
        matched = [rule.render(metrics) for rule in self.rules if rule.matches(metrics)]
        return matched or [self.fallback]

    def justify(self, metrics: Any) -> str:
        """Joined justification string for display and export"""
        return self.separator.join(self.reasons(metrics))
