"""Definition of the note type flashcards are stored in.

The templates and styling are pushed on every run so edits made in Anki's
note type editor are reverted to what the renderer expects.
"""

from typing import Any

DEFAULT_MODEL_NAME = "AnkiLink Basic"
FIELD_NAMES = ["Front", "Back"]
CARD_NAME = "Card 1"

FRONT_TEMPLATE = '<div class="front">{{Front}}</div>'
BACK_TEMPLATE = (
    "{{FrontSide}}\n"
    '<hr id="answer">\n'
    '<div class="back">{{Back}}</div>'
)

CSS = """\
.card {
  font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
  font-size: 20px;
  text-align: left;
  color: black;
  background-color: white;
}
.front {
  font-weight: 600;
}
.back p {
  margin: 0.4em 0;
}
pre {
  padding: 0.6em;
  border-radius: 4px;
  background: #f4f4f4;
  overflow-x: auto;
}
code {
  font-family: "SFMono-Regular", Consolas, "Liberation Mono", monospace;
  font-size: 0.85em;
}
table {
  border-collapse: collapse;
}
th, td {
  border: 1px solid #ccc;
  padding: 0.2em 0.5em;
}
.nightMode pre {
  background: #2b2b2b;
}
"""


def templates() -> dict[str, dict[str, str]]:
    """Card templates keyed by card name, as ``updateModelTemplates`` wants."""
    return {CARD_NAME: {"Front": FRONT_TEMPLATE, "Back": BACK_TEMPLATE}}


def create_model_params(model_name: str) -> dict[str, Any]:
    """Parameters for ``createModel``."""
    return {
        "modelName": model_name,
        "inOrderFields": list(FIELD_NAMES),
        "css": CSS,
        "isCloze": False,
        "cardTemplates": [
            {"Name": CARD_NAME, "Front": FRONT_TEMPLATE, "Back": BACK_TEMPLATE}
        ],
    }
