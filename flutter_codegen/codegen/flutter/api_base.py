"""
Shared transport generator.

Renders ``api_service.dart``: the HTTP wrapper and ``ApiException`` that
every generated service depends on. It is generated once per output tree.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.schema import ModelDescriptor
from .base import DartGenerator

AUTH_SCHEMES = {"bearer": "Bearer", "basic": "Basic"}

BASE_FILE_NAME = "api_service"


@dataclass
class ApiBaseSpec:
    base_url: str
    timeout: int
    auth_type: str
    auth_header: str
    auth_scheme: str
    nullable_suffix: str
    doc_exception: str = ""
    doc_service: str = ""


class ApiClientBaseGenerator(DartGenerator):
    """Generates the shared ``ApiService`` transport."""

    output_section = "services"

    @property
    def component_name(self) -> str:
        return "api_base"

    def build_spec(self) -> ApiBaseSpec:
        api = self.config.api
        auth_type = (api.auth_type or "none").lower()
        if auth_type not in AUTH_SCHEMES:
            auth_type = "none"
        return ApiBaseSpec(
            base_url=api.base_url.rstrip("/"),
            timeout=int(api.timeout),
            auth_type=auth_type,
            auth_header=api.auth_header,
            auth_scheme=AUTH_SCHEMES.get(auth_type, ""),
            nullable_suffix="?" if self.null_safety else "",
            doc_exception=self.format_doc_comment("Error raised by generated API services."),
            doc_service=self.format_doc_comment("HTTP transport shared by generated API services."),
        )

    def get_output_path(self, name: str = BASE_FILE_NAME) -> str:
        return super().get_output_path(name)

    def generate(
        self,
        descriptor: Optional[ModelDescriptor] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Generate ``api_service.dart``; ``descriptor`` is not used."""
        code = self.render_template(self.template_name("api_service"), {"api": self.build_spec()})
        return self.format_code(code)
