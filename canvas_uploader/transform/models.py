from dataclasses import dataclass, field


@dataclass
class StylesheetFragment:
    """CSS blocks collected in source order, plus non-fatal warnings."""

    blocks: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def append(self, css_text: str) -> None:
        self.blocks.append(css_text)

    @property
    def css(self) -> str:
        return "".join(f"\n{block}\n" for block in self.blocks)


@dataclass(frozen=True)
class TransformedFragment:
    """Self-contained body markup handed to the pushing client."""

    file: str
    body_html: str
    warnings: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "file": self.file,
            "bodyHtml": self.body_html,
            "warnings": list(self.warnings),
        }
