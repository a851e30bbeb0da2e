from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Add scripts to path for import
sys.path.insert(
    0, str(Path(__file__).resolve().parent.parent.parent.parent / "scripts")
)


class TestPlanPageSizesCli:
    def test_prints_plan_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        from plan_page_sizes import main

        assert main(["--template", "three-top-heavy"]) == 0
        plan = json.loads(capsys.readouterr().out)
        assert plan["unique_presets"] == ["square_1x1", "comic_sixth_grid"]
        assert plan["by_slot"]["top"]["width"] == 1024

    def test_model_family_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        from plan_page_sizes import main

        assert main(["--template", "full-page", "--model-family", "sd15"]) == 0
        plan = json.loads(capsys.readouterr().out)
        assert plan["by_slot"]["main"]["width"] == 448

    def test_custom_layouts_dir(self, capsys: pytest.CaptureFixture[str]) -> None:
        from plan_page_sizes import PROJECT_ROOT, main

        exit_code = main(
            [
                "--template",
                "webtoon-strip",
                "--page-size",
                "web_hd",
                "--layouts-dir",
                str(PROJECT_ROOT / "configs" / "layouts"),
            ]
        )
        assert exit_code == 0
        plan = json.loads(capsys.readouterr().out)
        assert set(plan["by_slot"]) == {"top", "middle", "bottom"}

    def test_list_templates(self, capsys: pytest.CaptureFixture[str]) -> None:
        from plan_page_sizes import main

        assert main(["--list"]) == 0
        assert "six-grid" in capsys.readouterr().out.split()

    def test_unknown_template(self) -> None:
        from plan_page_sizes import main

        assert main(["--template", "nonexistent"]) == 1

    def test_missing_template(self) -> None:
        from plan_page_sizes import main

        assert main([]) == 2
