"""Konfigurationsmanager für den Notenrechner.

Die aktive Konfiguration liegt in config/grader_config.yaml, benannte
Szenarien (z.B. "strict" mit hybrid_formula: reject) unter scenarios/.
Serialisierung über ruamel.yaml, damit Abschnittskommentare erhalten bleiben.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.prompt import Confirm
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import GraderConfig

console = Console()

_yaml = YAML()
_yaml.default_flow_style = False
_yaml.width = 100

_HEADER_LINES = [
    "=" * 44,
    "Course grade calculator: configuration",
    "Weights and grade bands are fixed (config/defaults.py)",
    "=" * 44,
]

# Abschnitt → (Überschrift, Erläuterung)
_SECTIONS: dict[str, tuple[str, Optional[str]]] = {
    "grading": ("Course types",
                "unknown_course_type: default | reject\n"
                "hybrid_formula: theory | reject"),
    "attendance": ("Attendance",
                   "Attendance marks (0-5) are written against this assessment."),
    "export": ("Export", None),
}


class ScenarioInfo(BaseModel):
    """Eintrag der Szenario-Liste."""

    name: str
    path: str
    description: str = ""
    created: str = ""


def _read_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return _yaml.load(f)


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "grader_config.yaml"
    SCENARIOS_DIR = Path("scenarios")

    def first_run_check(self) -> bool:
        """True solange noch keine aktive Konfiguration gespeichert wurde."""
        return not self.DEFAULT_CONFIG.exists()

    def _scenario_path(self, name: str) -> Path:
        return self.SCENARIOS_DIR / f"{name}.yaml"

    def _meta_path(self, name: str) -> Path:
        return self.SCENARIOS_DIR / f"{name}.meta.yaml"

    # ─── Laden / Speichern ───

    def load(self, path: Optional[Path] = None) -> GraderConfig:
        """Liest eine Konfiguration und validiert sie.

        Raises:
            FileNotFoundError: Datei existiert nicht.
            ValueError: Inhalt passt nicht zum Schema.
        """
        source = Path(path) if path else self.DEFAULT_CONFIG
        if not source.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {source}\n"
                f"Run 'python main.py setup' first."
            )
        raw = _read_yaml(source) or {}
        try:
            return GraderConfig.model_validate(dict(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid configuration file: {source}\n{e}") from e

    def save(self, config: GraderConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration mit Kopf- und Abschnittskommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        doc = CommentedMap(json.loads(config.model_dump_json()))
        header = _HEADER_LINES + [f"Saved: {date.today().isoformat()}"]
        doc.yaml_set_start_comment("\n".join(header))
        for key, (title, note) in _SECTIONS.items():
            text = f"\n─── {title} ───"
            if note:
                text += f"\n{note}"
            doc.yaml_set_comment_before_after_key(key, before=text)

        with open(target, "w", encoding="utf-8") as f:
            _yaml.dump(doc, f)
        console.print(f"[green]✓[/green] Configuration saved: {target}")

    # ─── Szenarien ───

    def save_scenario(self, config: GraderConfig, name: str,
                      description: str = "") -> bool:
        """Legt ein benanntes Szenario an. False wenn der Nutzer das Überschreiben ablehnt."""
        target = self._scenario_path(name)
        if target.exists() and not Confirm.ask(
            f"Scenario '{name}' already exists. Overwrite?", default=False
        ):
            console.print("[yellow]Cancelled.[/yellow]")
            return False

        self.save(config, target)
        meta = {"name": name, "description": description,
                "created": date.today().isoformat()}
        with open(self._meta_path(name), "w", encoding="utf-8") as f:
            _yaml.dump(meta, f)
        console.print(f"[green]✓[/green] Scenario '{name}' saved.")
        return True

    def list_scenarios(self) -> list[ScenarioInfo]:
        if not self.SCENARIOS_DIR.is_dir():
            return []
        result = []
        for path in sorted(self.SCENARIOS_DIR.glob("*.yaml")):
            name = path.stem
            if name.endswith(".meta"):
                continue
            meta_path = self._meta_path(name)
            meta = (_read_yaml(meta_path) or {}) if meta_path.exists() else {}
            result.append(ScenarioInfo(
                name=name,
                path=str(path),
                description=str(meta.get("description", "")),
                created=str(meta.get("created", "")),
            ))
        return result

    def load_scenario(self, name: str) -> GraderConfig:
        source = self._scenario_path(name)
        if not source.exists():
            known = ", ".join(s.name for s in self.list_scenarios()) or "none"
            raise FileNotFoundError(f"Scenario '{name}' not found (available: {known})")
        return self.load(source)
