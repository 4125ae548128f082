"""
Compliance event templates and due-date rules.

A template describes one recurring or one-off obligation; which templates
apply to a business depends on its entity type and state.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

BOIR_EARLIEST_DEADLINE = datetime(2025, 1, 1)

_FOR_PROFIT = ("LLC", "Corporation", "Professional Corporation", "S-Corp", "C-Corp")


@dataclass(frozen=True)
class ComplianceTemplate:
    event_type: str
    title: str
    description: str
    category: str
    priority: str
    is_recurring: bool
    recurring_interval: Optional[str] = None
    entity_types: Optional[Tuple[str, ...]] = None
    states: Optional[Tuple[str, ...]] = None

    def applies_to(self, entity_type: Optional[str], state: Optional[str]) -> bool:
        if self.entity_types is not None and entity_type not in self.entity_types:
            return False
        if self.states is not None and (state or "").upper() not in self.states:
            return False
        return True


COMPLIANCE_TEMPLATES: List[ComplianceTemplate] = [
    # Federal requirements
    ComplianceTemplate(
        event_type="tax_filing",
        title="Annual Income Tax Return Filing",
        description="File federal income tax return for your business entity",
        category="tax",
        priority="high",
        is_recurring=True,
        recurring_interval="yearly",
        entity_types=_FOR_PROFIT,
    ),
    ComplianceTemplate(
        event_type="quarterly_taxes",
        title="Quarterly Estimated Tax Payment",
        description="Submit quarterly estimated tax payments to IRS",
        category="tax",
        priority="high",
        is_recurring=True,
        recurring_interval="quarterly",
        entity_types=_FOR_PROFIT,
    ),
    ComplianceTemplate(
        event_type="boir_filing",
        title="Beneficial Ownership Information Report",
        description="File BOIR with FinCEN as required by Corporate Transparency Act",
        category="compliance",
        priority="high",
        is_recurring=False,
        entity_types=_FOR_PROFIT,
    ),
    ComplianceTemplate(
        event_type="business_license_renewal",
        title="Business License Renewal",
        description="Renew business license with local authorities",
        category="licensing",
        priority="medium",
        is_recurring=True,
        recurring_interval="yearly",
        entity_types=_FOR_PROFIT,
    ),

    # State-specific requirements
    ComplianceTemplate(
        event_type="annual_report",
        title="Annual Report Filing",
        description="File annual report with Secretary of State",
        category="state_filing",
        priority="high",
        is_recurring=True,
        recurring_interval="yearly",
        entity_types=_FOR_PROFIT,
        states=("CA", "NY", "TX", "FL", "IL", "PA", "OH", "GA", "NC", "MI"),
    ),
    ComplianceTemplate(
        event_type="franchise_tax",
        title="Franchise Tax Payment",
        description="Pay state franchise tax to maintain good standing",
        category="tax",
        priority="high",
        is_recurring=True,
        recurring_interval="yearly",
        entity_types=_FOR_PROFIT,
        states=("CA", "TX", "DE", "NY"),
    ),

    # California
    ComplianceTemplate(
        event_type="ca_llc_fee",
        title="California LLC Annual Fee",
        description="Pay California LLC annual fee to Franchise Tax Board",
        category="tax",
        priority="high",
        is_recurring=True,
        recurring_interval="yearly",
        entity_types=("LLC",),
        states=("CA",),
    ),
    ComplianceTemplate(
        event_type="ca_statement_of_information",
        title="California Statement of Information",
        description="File Statement of Information with California Secretary of State",
        category="state_filing",
        priority="high",
        is_recurring=True,
        recurring_interval="biennial",
        entity_types=("LLC", "Corporation"),
        states=("CA",),
    ),
]


def applicable_templates(entity_type: Optional[str], state: Optional[str]) -> List[ComplianceTemplate]:
    return [t for t in COMPLIANCE_TEMPLATES if t.applies_to(entity_type, state)]


def _add_years(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # Feb 29 on a non-leap target year
        return value.replace(year=value.year + years, day=28)


def calculate_due_dates(template: ComplianceTemplate, base_date: datetime,
                        now: Optional[datetime] = None) -> List[datetime]:
    """
    Due dates for one template, anchored on the business formation date.

    Only dates strictly in the future are returned.
    """
    now = now or datetime.utcnow()
    year = now.year
    dates: List[datetime] = []

    if template.event_type == "quarterly_taxes":
        dates.extend([
            datetime(year, 4, 15),
            datetime(year, 6, 15),
            datetime(year, 9, 15),
            datetime(year + 1, 1, 15),
        ])
    elif template.event_type == "annual_report":
        # End of the anniversary month
        last_day = calendar.monthrange(year, base_date.month)[1]
        dates.append(datetime(year, base_date.month, last_day))
    elif template.event_type == "ca_llc_fee":
        dates.append(datetime(year, 4, 15))
    elif template.event_type == "ca_statement_of_information":
        dates.append(datetime(year, base_date.month, 1))
        if template.recurring_interval == "biennial":
            dates.append(datetime(year + 2, base_date.month, 1))
    elif template.event_type == "franchise_tax":
        dates.append(datetime(year, 3, 15))
    elif template.event_type == "boir_filing":
        dates.append(max(base_date + timedelta(days=90), BOIR_EARLIEST_DEADLINE))
    else:
        dates.append(_add_years(base_date, 1))

    return [d for d in dates if d > now]
