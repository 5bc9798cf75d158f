#!/usr/bin/env python3
"""執行所有檢查：格式、靜態分析與測試。

依序執行 Black、isort、Ruff、Pylint，最後以 pytest 跑 tests/ 下的測試
（Qt 使用 offscreen 平台，不需要顯示器）。

用法：
    python run_all_linters.py            # 全部執行
    python run_all_linters.py --no-tests # 只跑 linter
"""

from pathlib import Path
import os
import subprocess
import sys

ROOT = Path(__file__).parent
SOURCES = ["app", "core", "infrastructure", "main.py"]


def run_command(cmd: list[str], description: str, env: dict[str, str] | None = None) -> bool:
    """執行命令，輸出結果並回傳是否成功。"""
    print(f"\n{'=' * 60}")
    print(f"執行: {description}")
    print(f"命令: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=False, cwd=ROOT, env=env
        )
    except OSError as e:
        print(f"❌ 無法執行: {e}")
        return False

    output = (result.stdout + result.stderr).strip()
    print("✅ 成功" if result.returncode == 0 else "❌ 失敗")
    print(f"\n{output}" if output else "(無輸出)")
    return result.returncode == 0


def main(argv: list[str]) -> int:
    python = sys.executable
    commands: list[tuple[list[str], str, dict[str, str] | None]] = [
        ([python, "-m", "black", ".", "--check"], "Black 格式化檢查", None),
        ([python, "-m", "isort", ".", "--check-only"], "isort 匯入排序檢查", None),
        ([python, "-m", "ruff", "check", "."], "Ruff 靜態檢查", None),
        ([python, "-m", "pylint", *SOURCES], "Pylint 靜態分析", None),
    ]
    if "--no-tests" not in argv:
        env = {**os.environ, "QT_QPA_PLATFORM": "offscreen"}
        commands.append(([python, "-m", "pytest", "-q"], "pytest 測試", env))

    results = [
        (description, run_command(cmd, description, env)) for cmd, description, env in commands
    ]

    print(f"\n{'=' * 60}")
    print("總結報告")
    print("=" * 60)
    for description, success in results:
        print(f"{description}: {'✅ 通過' if success else '❌ 失敗'}")

    all_passed = all(success for _, success in results)
    print(f"\n整體結果: {'✅ 全部通過' if all_passed else '❌ 有錯誤'}")
    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
