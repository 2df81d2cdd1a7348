"""Client for the Expense Tracker REST API.

Provides the HTTP client (:mod:`expense_client.api`), dashboard aggregation and
data loading (:mod:`expense_client.services`) and a command-line front end
(:mod:`expense_client.cli`).
"""

__version__ = "0.1.0"
