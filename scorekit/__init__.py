"""Security scorecard results: policies, aggregate scores and table, JSON and SARIF reports."""

__version__ = "0.1.0"
__all__ = ["checks", "detail_logger", "policy", "repo_url", "result", "sarif", "version"]