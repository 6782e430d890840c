"""
Rule Validation Abort Taxonomy

Classify the reasons a rule evaluation could not complete.

Every abort falls into one of 4 categories, each with:
- severity: 'high' | 'medium'
- client_defect: whether the caller sent a bad request
- pattern: What went wrong technically
- example: A request that triggers it
"""

from .outcomes import INVALID_SCHEMA, TYPE_ERROR, MISSING_REQUIRED_FIELD, MISSING_DATA_FIELD


class AbortTaxonomy:
    """Map abort reasons to caller-facing categories."""

    CATEGORIES = {
        INVALID_SCHEMA: {
            'severity': 'high',
            'client_defect': True,
            'pattern': 'Top-level payload is not a JSON object',
            'example': "A bare string such as \"'\" instead of {rule, data}",
        },
        MISSING_REQUIRED_FIELD: {
            'severity': 'high',
            'client_defect': True,
            'pattern': 'rule, data, rule.field, rule.condition or rule.condition_value is absent',
            'example': '{} (no rule and no data)',
        },
        TYPE_ERROR: {
            'severity': 'high',
            'client_defect': True,
            'pattern': 'A present field has the wrong shape or an unknown condition name',
            'example': '{"rule": "", "data": {}} or condition "between"',
        },
        MISSING_DATA_FIELD: {
            'severity': 'medium',
            'client_defect': True,
            'pattern': 'Request is well-formed but rule.field cannot be located in data',
            'example': 'field "person.age" against data {}',
        },
    }

    @classmethod
    def classify(cls, reason: str) -> dict:
        """
        Retrieve category info for an abort reason.

        Args:
            reason: One of the 4 category keys

        Returns:
            Dict with severity, client_defect, pattern, example
        """
        if reason in cls.CATEGORIES:
            return cls.CATEGORIES[reason]
        else:
            return {
                'severity': 'unknown',
                'client_defect': False,
                'pattern': 'Unknown abort category',
                'example': '',
            }

    @classmethod
    def all_categories(cls) -> list:
        """Return list of all abort category names."""
        return list(cls.CATEGORIES.keys())

    @classmethod
    def severity_level(cls, reason: str) -> str:
        """Get severity of an abort category."""
        return cls.classify(reason).get('severity', 'unknown')

    @classmethod
    def is_client_defect(cls, reason: str) -> bool:
        """True when the abort reflects a defect in the caller's input."""
        return bool(cls.classify(reason).get('client_defect'))
