"""
Canned tax-law answers for local development and demos.

Queries are matched by keyword; the first matching group wins. This file
can be dropped once every deployment talks to the real backend.
"""

from dataclasses import dataclass

CORPORATE_TAX_ANSWER = (
    "In Ethiopia, corporate income tax rates vary based on the nature of the business activity. "
    "For most enterprises, the standard corporate income tax rate is 30% on taxable income. "
    "However, there are some important considerations:\n\n"
    "1. **Manufacturing Enterprises**: May enjoy tax holidays or reduced rates under investment incentive programs.\n\n"
    "2. **Small Business Enterprises**: Defined as businesses with annual turnover below 3 million Birr, "
    "and are taxed at 10% on net profit.\n\n"
    "3. **Banks and Insurance Companies**: Subject to higher rates, typically around 35% for commercial banks.\n\n"
    "4. **Petroleum Companies**: Subject to special tax regimes.\n\n"
    "References:\n"
    "- Income Tax Proclamation No. 979/2016, Articles 28-35\n"
    "- Council of Ministers Regulations No. 421/2018"
)

WITHHOLDING_TAX_ANSWER = (
    "Withholding tax in Ethiopia is calculated on various types of payments. "
    "Here are the main categories:\n\n"
    "1. **Dividends**: 10% withheld by the payer\n"
    "2. **Interest**: 10% withheld\n"
    "3. **Royalties**: 10% withheld\n"
    "4. **Rental Income**: 10% withheld\n"
    "5. **Service Fees**: 5-10% depending on the service type\n"
    "6. **Contractor Payments**: 2-3% on gross payment for certain services\n\n"
    "**Calculation Formula**:\n"
    "Withholding Tax = Payment Amount × Applicable Rate\n\n"
    "**Example**: If a company pays 100,000 Birr as dividend:\n"
    "Withholding Tax = 100,000 × 10% = 10,000 Birr\n"
    "Net Payment = 100,000 - 10,000 = 90,000 Birr\n\n"
    "References:\n"
    "- Income Tax Proclamation No. 979/2016, Articles 69-93\n"
    "- Tax Administration Proclamation No. 983/2016"
)

DEDUCTIBLE_EXPENSES_ANSWER = (
    "Under Ethiopian tax law, the following business expenses are generally deductible "
    "in computing taxable income:\n\n"
    "**Ordinary and Necessary Expenses**:\n"
    "- Salaries and wages paid to employees\n"
    "- Cost of goods sold (COGS)\n"
    "- Rent for business premises\n"
    "- Utilities (electricity, water, telephone)\n"
    "- Office supplies and materials\n"
    "- Professional fees (accounting, legal, consulting)\n"
    "- Insurance premiums for business\n"
    "- Depreciation on business assets\n"
    "- Interest on business loans\n"
    "- Transportation and travel expenses\n"
    "- Advertising and marketing costs\n"
    "- Training and development expenses\n\n"
    "**Expenses NOT Deductible**:\n"
    "- Personal living expenses\n"
    "- Fines and penalties\n"
    "- Taxes on income itself\n"
    "- Expenditures for acquiring capital assets (depreciated instead)\n"
    "- Political contributions\n"
    "- Donations (with limited exceptions)\n\n"
    "**Important**: All deductions must be supported by documentation and substantiate business purpose.\n\n"
    "References:\n"
    "- Income Tax Proclamation No. 979/2016, Articles 14-20\n"
    "- Tax Administration Proclamation No. 983/2016"
)


def fallback_answer(query: str) -> str:
    """Generic answer embedding the original query verbatim."""
    return (
        f'Thank you for your question about Ethiopian tax law: "{query}"\n\n'
        "Based on Ethiopian tax regulations, I can provide guidance on various tax matters. "
        "However, for the specific scenario you mentioned, I recommend consulting with:\n\n"
        "1. **Ethiopian Tax Authority** - For official tax guidance\n"
        "2. **Licensed Tax Professionals** - For personalized advice\n"
        "3. **Official Tax Proclamations** - Income Tax Proclamation No. 979/2016 "
        "and Tax Administration Proclamation No. 983/2016\n\n"
        "Please note that while I strive for accuracy, this information should not be "
        "considered as professional tax advice. Always verify with authoritative sources."
    )


@dataclass(frozen=True)
class KeywordGroup:
    """Keywords that select one canned answer."""

    name: str
    keywords: tuple[str, ...]
    answer: str

    def matches(self, lowered_query: str) -> bool:
        return any(keyword in lowered_query for keyword in self.keywords)


# Checked in order; the first match wins
KEYWORD_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup(
        name="corporate_tax",
        keywords=("corporate tax", "tax rate", "corporate income"),
        answer=CORPORATE_TAX_ANSWER,
    ),
    KeywordGroup(
        name="withholding_tax",
        keywords=("withholding", "withheld"),
        answer=WITHHOLDING_TAX_ANSWER,
    ),
    KeywordGroup(
        name="deductible_expenses",
        keywords=("deductible", "deduction", "expenses"),
        answer=DEDUCTIBLE_EXPENSES_ANSWER,
    ),
)


def match_keyword_group(query: str) -> KeywordGroup | None:
    """Return the first keyword group found in query, case-insensitively."""
    lowered = query.lower()
    for group in KEYWORD_GROUPS:
        if group.matches(lowered):
            return group
    return None


def get_mock_response(query: str) -> str:
    """Canned answer for query, or the generic fallback when nothing matches."""
    group = match_keyword_group(query)
    if group is None:
        return fallback_answer(query)
    return group.answer


def extract_references(answer: str) -> list[str]:
    """The bullet lines following the "References:" heading of an answer."""
    _, marker, tail = answer.partition("References:")
    if not marker:
        return []
    return [
        line.strip()[2:].strip()
        for line in tail.splitlines()
        if line.strip().startswith("- ")
    ]
