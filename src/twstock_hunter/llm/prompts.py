import yaml
from pathlib import Path

PROMPT_DIR = Path(__file__).parent / "prompt_files"

def load_prompt(name: str) -> str:
    # Prompts ship inside the package so the request is fixed at build time
    yaml_path = PROMPT_DIR / f"{name}.yaml"
    if not yaml_path.exists():
        raise FileNotFoundError(f"Prompt {name} not found in {PROMPT_DIR}")
    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data.get("content", "").strip()
