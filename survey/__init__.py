"""Survey collection service and multi-page questionnaire client.

The FastAPI application factory lives in `survey.main` (`create_app`); the
questionnaire client state machine lives in `survey.client`. Business logic
for the service lives in `survey/logic/` and route handlers in
`survey/routes/`.
"""

from __future__ import annotations

__version__ = "0.1.0"
