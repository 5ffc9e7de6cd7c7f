"""TWStock Trend Hunter - a daily Taiwan stock shortlist generated by Gemini.

The package asks Gemini (with Google Search grounding) for ten promising
Taiwan-listed stocks, parses the structured JSON reply into a report and
presents it as cards in the terminal or in a single-page web client.

Components:
- llm: prompt, response schema, Gemini client and the analysis call
- session: idle/analyzing/complete/error state machine
- rendering: terminal cards, shared view helpers and the email draft
- main_web: FastAPI single-page client
- main_cli: command line entry point
"""

__version__ = "0.1.0"
