from __future__ import annotations

import enum
from dataclasses import dataclass

from protoc_webapi_ts.errors import OptionsError

DEFAULT_WEBAPI_PATH = "webapi"


class Role(str, enum.Enum):
    CLIENT = "client"
    SERVER = "server"


@dataclass(frozen=True)
class GeneratorOptions:
    role: Role = Role.CLIENT
    webapi_path: str = DEFAULT_WEBAPI_PATH
    # Fail on field kinds without an explicit mapping instead of emitting `string`.
    strict: bool = False

    @property
    def is_server(self) -> bool:
        return self.role is Role.SERVER

    @classmethod
    def parse_parameter(cls, parameter: str) -> GeneratorOptions:
        """Parse a protoc plugin parameter such as ``server,webapi_path=lib/webapi,strict``.

        Bare words are flags; ``key=value`` pairs set values. ``client`` and
        ``server`` are shorthands for ``role=client`` / ``role=server``.
        """
        role = Role.CLIENT
        webapi_path = DEFAULT_WEBAPI_PATH
        strict = False

        for option in (p.strip() for p in parameter.split(",")):
            if not option:
                continue
            if "=" in option:
                key, value = option.split("=", 1)
                key = key.strip()
                value = value.strip()
            else:
                key, value = option, None

            if key in ("client", "server") and value is None:
                role = Role(key)
            elif key == "role":
                role = _parse_role(value)
            elif key == "webapi_path" and value:
                webapi_path = value
            elif key == "strict" and value is None:
                strict = True
            else:
                raise OptionsError(f"Unknown generator option '{option}'")

        return cls(role=role, webapi_path=webapi_path, strict=strict)


def _parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise OptionsError(
            f"Unknown role '{value}'. Expected one of: {', '.join(r.value for r in Role)}"
        ) from None
