from .fairness import FairnessReport, audit_async, chi_squared_critical, run_fairness_audit

__all__ = ["FairnessReport", "audit_async", "chi_squared_critical", "run_fairness_audit"]
