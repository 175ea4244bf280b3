"""Utility script to scaffold a local .env file."""
from __future__ import annotations

from pathlib import Path

ENV_TEMPLATE = """# Environment configuration for the daily report service
DEBUG=true
ASSETS_DIR={assets}
FONT_PATH={assets}/fonts/NotoNaskhArabic-Regular.ttf
BOLD_FONT_PATH={assets}/fonts/NotoNaskhArabic-Bold.ttf
IMAGE_FETCH_TIMEOUT_SECONDS=8
BULK_PAUSE_SECONDS=0
"""


def main() -> None:
    env_path = Path(".env")
    if env_path.exists():
        print(".env already exists. No changes made.")
        return

    assets = (Path(__file__).resolve().parent.parent / "assets").as_posix()
    env_path.write_text(ENV_TEMPLATE.format(assets=assets), encoding="utf-8")
    fonts = Path(assets) / "fonts"
    if not any(fonts.glob("*.ttf")):
        print(f"No fonts found in {fonts}. Copy an Arabic TrueType font there before generating reports.")
    print("Created .env. Please review the file before deployment.")


if __name__ == "__main__":
    main()
