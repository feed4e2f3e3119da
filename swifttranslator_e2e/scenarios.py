"""Test case catalogue for the Singlish-to-Sinhala translator."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence

# Sinhala independent vowels and consonants (අ .. ෆ).
SINHALA_LETTER = re.compile("[අ-ෆ]")


def has_sinhala(text: str) -> bool:
    return bool(SINHALA_LETTER.search(text or ""))


@dataclass(frozen=True)
class ContainsSubstring:
    expected: str

    def __call__(self, output: str) -> bool:
        return self.expected in output

    def describe(self) -> str:
        return f"contains {self.expected!r}"


@dataclass(frozen=True)
class NonEmpty:
    def __call__(self, output: str) -> bool:
        return len(output) > 0

    def describe(self) -> str:
        return "non-empty"


@dataclass(frozen=True)
class Custom:
    check: Callable[[str], bool]
    label: str = "custom check"

    def __call__(self, output: str) -> bool:
        return bool(self.check(output))

    def describe(self) -> str:
        return self.label


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    input: str
    expect: Any = NonEmpty()
    # Require at least one Sinhala letter before the output counts as stable.
    check_script: bool = True
    # Live typing: type this prefix key by key, wait for output, then type the rest.
    live_prefix: str | None = None
    keystroke_delay_s: float = 0.15

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("scenario id must not be empty")
        if self.live_prefix is not None and not self.input.startswith(self.live_prefix):
            raise ValueError(f"{self.id}: live_prefix {self.live_prefix!r} is not a prefix of the input")

    @property
    def is_live(self) -> bool:
        return self.live_prefix is not None


def positive(tc_id: str, name: str, text: str, expected: str) -> Scenario:
    return Scenario(id=tc_id, name=name, input=text, expect=ContainsSubstring(expected))


def negative(tc_id: str, name: str, text: str) -> Scenario:
    # Malformed input may legitimately come back without Sinhala letters, so
    # only "something changed" is waited for. A human reviews the exported output.
    return Scenario(id=tc_id, name=name, input=text, expect=NonEmpty(), check_script=False)


POSITIVE_SCENARIOS: tuple[Scenario, ...] = (
    positive("Pos_Fun_0001", "Simple sentence 1", "mama gedhara yanavaa.", "මම"),
    positive("Pos_Fun_0002", "Simple sentence 2", "mata bath oonee.", "මට"),
    positive("Pos_Fun_0003", "Simple sentence 3", "api paasal yanavaa.", "අපි"),
    positive("Pos_Fun_0004", "Compound sentence", "oyaa hari, ehenam api yamu.", "අපි"),
    positive("Pos_Fun_0005", "Compound with saha", "api kaeema kanna saha passe film balamu.", "අපි"),
    positive("Pos_Fun_0006", "Complex conditional", "oyaa enavaanam mama innavaa.", "මම"),
    positive("Pos_Fun_0007", "Complex cause", "vaessa nisaa api yannee naehae.", "නැ"),
    positive("Pos_Fun_0008", "Question greeting", "oyaata kohomadha?", "ඔයාට"),
    positive("Pos_Fun_0009", "Question plan", "api heta yanavaa dha?", "?"),
    positive("Pos_Fun_0010", "Command come", "vahaama enna.", "එන්න"),
    positive("Pos_Fun_0011", "Command go", "issarahata yanna.", "යන්න"),
    positive("Pos_Fun_0012", "Positive form", "mama vaeda karanavaa.", "මම"),
    positive("Pos_Fun_0013", "Negative form", "mama vaeda karannee naehae.", "නැ"),
    positive("Pos_Fun_0014", "Greeting", "aayuboovan!", "!"),
    positive("Pos_Fun_0015", "Polite request", "karuNaakaralaa eka balanna.", "කරුණා"),
    positive("Pos_Fun_0016", "Response", "hari, mama karannam.", "හරි"),
    positive("Pos_Fun_0017", "Past tense", "mama iiyee gedhara giyaa.", "ගියා"),
    positive("Pos_Fun_0018", "Present tense", "mama dhaen inne.", "දැන්"),
    positive("Pos_Fun_0019", "Future tense", "api heta enavaa.", "හෙට"),
    positive("Pos_Fun_0020", "Plural pronoun", "oyaalaa enavaa.", "ඔයාලා"),
    positive("Pos_Fun_0021", "Mixed English", "Zoom meeting ekak thiyenavaa.", "Zoom"),
    positive("Pos_Fun_0022", "Place name", "api Kandy yanavaa.", "Kandy"),
    positive("Pos_Fun_0023", "Abbreviations", "mage ID eka dhenna.", "ID"),
    positive("Pos_Fun_0024", "Numbers & currency", "mata Rs. 500 oonee.", "Rs."),
)

NEGATIVE_SCENARIOS: tuple[Scenario, ...] = (
    negative("Neg_Fun_0001", "Joined words", "mamagedharayanavaa"),
    negative("Neg_Fun_0002", "No spaces sentence", "hetaapiyanavaa"),
    negative("Neg_Fun_0003", "Multiple spaces", "mama   gedhara   yanavaa"),
    negative("Neg_Fun_0004", "Line breaks", "mama gedhara\nyanavaa\nheta"),
    negative("Neg_Fun_0005", "Slang informal", "ela machan supiri!"),
    negative("Neg_Fun_0006", "Colloquial", "ado mokakda meeka"),
    negative("Neg_Fun_0007", "Mixed noisy English", "machan meeting eka Zoom ekee da?"),
    negative("Neg_Fun_0008", "Abbreviation heavy", "ASAP OTP eka evanna"),
    negative("Neg_Fun_0009", "Units and numbers", "mata 2kg bath saha 500ml wathura"),
    negative(
        "Neg_Fun_0010",
        "Long paragraph",
        "dhitvaa suLi kuNaatuva samaGa aethi vuu gQQvathura saha naayayaeem heethuven maarga "
        "sQQvarDhana aDhikaariya sathu maarga kotas vinaashayata pathva aethi athara pravaahana "
        "adaalaya balapaana lada bava saDHahan veyi.",
    ),
)

UI_SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        id="Pos_UI_0001",
        name="Real-time output updates while typing",
        input="mama kaeema kannavaa",
        expect=Custom(has_sinhala, "contains Sinhala letters"),
        live_prefix="mama kae",
        keystroke_delay_s=0.15,
    ),
)

SUITES: dict[str, tuple[Scenario, ...]] = {
    "positive": POSITIVE_SCENARIOS,
    "negative": NEGATIVE_SCENARIOS,
    "ui": UI_SCENARIOS,
}


def default_catalogue() -> list[Scenario]:
    return [*POSITIVE_SCENARIOS, *NEGATIVE_SCENARIOS, *UI_SCENARIOS]


def select(
    scenarios: Iterable[Scenario],
    ids: Sequence[str] | None = None,
) -> list[Scenario]:
    """Filter by scenario id, keeping catalogue order. Unknown ids raise `KeyError`."""
    items = list(scenarios)
    if not ids:
        return items
    wanted = set(ids)
    known = {s.id for s in items}
    missing = sorted(wanted - known)
    if missing:
        raise KeyError(f"Unknown scenario id(s): {', '.join(missing)}")
    return [s for s in items if s.id in wanted]


def check_unique(scenarios: Sequence[Scenario]) -> None:
    seen: set[str] = set()
    for s in scenarios:
        if s.id in seen:
            raise ValueError(f"Duplicate scenario id {s.id!r}")
        seen.add(s.id)


def parse_expectation(raw: Any) -> Any:
    if raw is None or raw == "non_empty":
        return NonEmpty()
    if isinstance(raw, Mapping) and isinstance(raw.get("contains"), str):
        return ContainsSubstring(raw["contains"])
    if isinstance(raw, Mapping) and raw.get("sinhala"):
        return Custom(has_sinhala, "contains Sinhala letters")
    raise ValueError(f"Unsupported expectation: {raw!r}")


def load_catalogue(path: str | Path) -> list[Scenario]:
    """Load scenarios from a JSON file.

    Schema:
    {
      "scenarios": [
        {"id": "Pos_Fun_0100", "name": "Greeting", "input": "aayuboovan!",
         "expect": {"contains": "!"}},
        {"id": "Neg_Fun_0100", "name": "Joined", "input": "mamayanavaa",
         "expect": "non_empty", "check_script": false},
        {"id": "Pos_UI_0100", "name": "Typing", "input": "mama kaeema",
         "live_prefix": "mama", "expect": {"sinhala": true}}
      ]
    }
    """
    payload = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    items = payload.get("scenarios") if isinstance(payload, Mapping) else payload
    if not isinstance(items, list):
        raise ValueError(f"{path}: expected a list of scenarios")

    out: list[Scenario] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError(f"{path}: scenario entries must be objects, got {item!r}")
        tc_id = str(item.get("id") or "").strip()
        text = item.get("input")
        if not tc_id or not isinstance(text, str):
            raise ValueError(f"{path}: every scenario needs an id and an input")
        prefix = item.get("live_prefix")
        if prefix is not None and not isinstance(prefix, str):
            raise ValueError(f"{path}: {tc_id}: live_prefix must be a string, got {prefix!r}")
        delay = item.get("keystroke_delay_s", 0.15)
        if isinstance(delay, bool) or not isinstance(delay, (int, float)):
            raise ValueError(f"{path}: {tc_id}: keystroke_delay_s must be a number, got {delay!r}")
        out.append(
            Scenario(
                id=tc_id,
                name=str(item.get("name") or tc_id),
                input=text,
                expect=parse_expectation(item.get("expect")),
                check_script=bool(item.get("check_script", True)),
                live_prefix=prefix,
                keystroke_delay_s=float(delay),
            )
        )
    check_unique(out)
    return out
