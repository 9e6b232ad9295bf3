"""
Eligibility Rule Vocabulary
Controlled vocabulary of rule fields and the lookup tables that translate
them into company profile attributes and supporting document types.
"""
import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


class RuleField(str, enum.Enum):
    """
    Subject fields an eligibility rule author may choose from.

    Any string outside the vocabulary parses to ``CUSTOM``, which has no
    profile attribute and therefore always evaluates as unknown.
    """

    LEGAL_STRUCTURE = "legalStructure"
    LEGAL_ENTITY_TYPE = "legalEntityType"
    JURISDICTION = "jurisdiction"
    ANNUAL_REVENUE = "annualRevenue"
    ANNUAL_BUDGET = "annualBudget"
    EMPLOYEE_COUNT = "employeeCount"
    TAX_STATUS = "taxStatus"
    YEARS_OPERATING = "yearsOperating"
    PROJECT_GEO = "projectGeo"
    APPLICANT_GEO = "applicantGeo"
    BENEFICIARY_TYPE = "beneficiaryType"
    CO_FUNDING_AVAILABLE = "coFundingAvailable"
    HAS_AUDITED_ACCOUNTS = "hasAuditedAccounts"
    HAS_FINANCIAL_STATEMENTS = "hasFinancialStatements"
    HAS_INSURANCE = "hasInsurance"
    HAS_SAFEGUARDING_POLICY = "hasSafeguardingPolicy"
    HAS_LOGIC_MODEL = "hasLogicModel"
    INDUSTRY = "industry"
    MISSION_AREA = "missionArea"
    REGISTRATION_STATUS = "registrationStatus"
    PROPOSAL_WRITER_AVAILABLE = "proposalWriterAvailable"
    PRIOR_GRANT_EXPERIENCE = "priorGrantExperience"
    CUSTOM = "custom"

    @classmethod
    def _missing_(cls, value: object) -> "RuleField":
        return cls.CUSTOM

    @classmethod
    def parse(cls, raw: Optional[str]) -> "RuleField":
        """Parse a stored field name, falling back to CUSTOM."""
        if raw is None:
            return cls.CUSTOM
        return cls(raw)


# Rule field -> CompanyProfile attribute.
# coFundingAvailable -> has_audited_accounts is kept as found in production data.
DEFAULT_ATTRIBUTE_MAP: Mapping[RuleField, str] = MappingProxyType(
    {
        RuleField.LEGAL_STRUCTURE: "legal_entity_type",
        RuleField.LEGAL_ENTITY_TYPE: "legal_entity_type",
        RuleField.JURISDICTION: "jurisdiction",
        RuleField.ANNUAL_REVENUE: "annual_revenue",
        RuleField.ANNUAL_BUDGET: "annual_budget",
        RuleField.EMPLOYEE_COUNT: "employee_count",
        RuleField.TAX_STATUS: "tax_status",
        RuleField.YEARS_OPERATING: "years_founded",
        RuleField.PROJECT_GEO: "geographies_served",
        RuleField.APPLICANT_GEO: "geographies_registered",
        RuleField.BENEFICIARY_TYPE: "beneficiary_population",
        RuleField.CO_FUNDING_AVAILABLE: "has_audited_accounts",
        RuleField.HAS_AUDITED_ACCOUNTS: "has_audited_accounts",
        RuleField.HAS_INSURANCE: "has_insurance",
        RuleField.HAS_SAFEGUARDING_POLICY: "has_safeguarding_policy",
        RuleField.INDUSTRY: "mission_areas",
        RuleField.MISSION_AREA: "mission_areas",
        RuleField.REGISTRATION_STATUS: "registration_status",
        RuleField.PROPOSAL_WRITER_AVAILABLE: "proposal_writer_available",
        RuleField.PRIOR_GRANT_EXPERIENCE: "prior_grant_wins",
    }
)

# Rule field -> document type that evidences it
DEFAULT_DOCUMENT_MAP: Mapping[RuleField, str] = MappingProxyType(
    {
        RuleField.HAS_AUDITED_ACCOUNTS: "audit",
        RuleField.HAS_FINANCIAL_STATEMENTS: "financial_statements",
        RuleField.HAS_INSURANCE: "insurance",
        RuleField.HAS_SAFEGUARDING_POLICY: "safeguarding_policy",
        RuleField.HAS_LOGIC_MODEL: "logic_model",
    }
)


@dataclass(frozen=True)
class MatchVocabulary:
    """
    Lookup tables used by the evaluator and the document-gap check.

    Passed into ``RuleEvaluator`` and ``EligibilityMatcher`` at construction
    so alternate vocabularies can be substituted without touching module state.
    """

    attribute_map: Mapping[RuleField, str] = field(default_factory=lambda: DEFAULT_ATTRIBUTE_MAP)
    document_map: Mapping[RuleField, str] = field(default_factory=lambda: DEFAULT_DOCUMENT_MAP)

    def profile_attribute(self, rule_field: RuleField) -> Optional[str]:
        """Profile attribute compared by rules on ``rule_field``, if any."""
        return self.attribute_map.get(rule_field)

    def required_document(self, rule_field: RuleField) -> Optional[str]:
        """Document type that evidences ``rule_field``, if any."""
        return self.document_map.get(rule_field)

    @property
    def required_documents(self) -> list[str]:
        """Distinct document types named by the document map, in map order."""
        return list(dict.fromkeys(self.document_map.values()))


DEFAULT_VOCABULARY = MatchVocabulary()
