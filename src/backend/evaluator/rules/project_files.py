from __future__ import annotations

from ..config import LicenseFileRuleConfig
from ..context import RuleContext
from ..result_rule import ResultRule

README_PATTERNS = ("README", "README.*", "readme.*")
LICENSE_FILE_PATTERNS = ("LICENSE*", "LICENCE*", "COPYING*")
LICENSE_HEADING = r"^#{1,2} Licen[cs]e\s*$"


class ReadmePresentRule(ResultRule):
    """Warn if the project ships no README."""

    def __init__(self, context: RuleContext, name: str = "README_PRESENT"):
        super().__init__(context, name)
        self.require(~self.source_tree_has_file(*README_PATTERNS))

    def run(self) -> None:
        self.warning(
            "The project's source tree does not contain a README file.",
            how_to_fix="Add a README.md describing the project and how to use it.",
        )


class LicenseFilePresentRule(ResultRule):
    """Flag projects that document their license neither in a license file nor in a README section."""

    config_model = LicenseFileRuleConfig

    def __init__(self, context: RuleContext, name: str = "LICENSE_FILE_PRESENT"):
        super().__init__(context, name)
        cfg = self.config
        documented = self.source_tree_has_file(*LICENSE_FILE_PATTERNS)
        if cfg.accept_readme_section:
            documented = documented | self.source_tree_has_file_with_contents(LICENSE_HEADING, *README_PATTERNS)
        self.require(~documented)

    def run(self) -> None:
        self.issue(
            self.config.severity,
            "The project's source tree contains no license information.",
            how_to_fix=(
                "Add a LICENSE file to the repository root, or a '## License' section to the README that names the "
                "project's license."
            ),
        )
