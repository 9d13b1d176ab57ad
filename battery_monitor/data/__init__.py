import json
from pathlib import Path

DEFAULT_THRESHOLDS = json.loads(
    Path(__file__).with_name("thresholds.json").read_text(encoding="utf-8")
)
