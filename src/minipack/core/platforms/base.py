from __future__ import annotations

"""
Base Definitions for Platform Format Adapters.

The resolution logic is platform-agnostic; everything that differs between
mini-program dialects (markup and stylesheet extensions, project config
file, base polyfill) is supplied through this interface.
"""

from abc import ABC, abstractmethod
from typing import List

from minipack.domain.constants import CONFIG_EXT, PREPROCESSOR_STYLE_EXTS, SCRIPT_EXT
from minipack.infra.fs import FilesystemProbe


class FormatAdapter(ABC):
    """
    Capability interface describing one target platform dialect.
    """

    target: str = ""
    template_ext: str = ""
    style_ext: str = ""
    script_module_ext: str = ""
    project_config_name: str = ""

    @abstractmethod
    def polyfill(self) -> str:
        """
        Return stylesheet content prepended to the aggregated app stylesheet.

        Returns:
            str: Polyfill source, or an empty string.
        """

    def bundle_extensions(self) -> List[str]:
        """
        Extensions probed when locating a page or component bundle.

        Order matters: it is the registration order of the bundle files.
        """
        return [
            SCRIPT_EXT,
            CONFIG_EXT,
            self.template_ext,
            self.style_ext,
            self.script_module_ext,
            *PREPROCESSOR_STYLE_EXTS,
        ]

    def entry_wiring(self, probe: FilesystemProbe, context_dir: str, name: str) -> List[str]:
        """
        Files packaged alongside an entry document.

        Only the entry's own stylesheet is carried; its script and document
        are handled by the engine.
        """
        return probe.get_files(context_dir, name, [self.style_ext])

    def is_template(self, path: str) -> bool:
        return path.endswith(self.template_ext)

    def output_names(self, entry_name: str) -> List[str]:
        """Emitted files that belong to a secondary entry document."""
        return [entry_name + ext for ext in (CONFIG_EXT, self.style_ext, SCRIPT_EXT)]
