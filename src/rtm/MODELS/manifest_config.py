"""
Overrides applied while resolving a runtime manifest.
"""
import os
from typing import Dict, Mapping, Optional
from dotenv import dotenv_values
from pydantic import BaseModel

ENV_PREFIX = "RTM_"
TRUTHY = ("1", "true", "yes", "on")


class RuntimeManifestConfig(BaseModel):
    """
    Deployment settings for image naming and pull behaviour.

    default_image_prefix and default_image_tag are applied to images that do
    not set their own. With bypass_pull_for_local_images enabled, images whose
    prefix equals local_image_prefix are treated as already present.
    """
    default_image_prefix: Optional[str] = None
    default_image_tag: Optional[str] = None
    bypass_pull_for_local_images: bool = False
    local_image_prefix: Optional[str] = None
    default_kind: Optional[str] = None

    @classmethod
    def from_env(cls,
                 env_file: Optional[str] = None,
                 environ: Optional[Mapping[str, str]] = None) -> "RuntimeManifestConfig":
        """
        Reads RTM_* variables from an optional .env file and the environment.

        :param env_file: Path to a .env file. Process variables take precedence over it.
        :param environ: The environment to read, defaults to os.environ.
        :return: The configuration.
        """
        values: Dict[str, Optional[str]] = {}
        if env_file:
            values.update(dotenv_values(env_file))
        values.update(os.environ if environ is None else environ)

        def get(name: str) -> Optional[str]:
            return values.get(ENV_PREFIX + name) or None

        bypass = get("BYPASS_PULL_FOR_LOCAL_IMAGES")
        return cls(
            default_image_prefix=get("DEFAULT_IMAGE_PREFIX"),
            default_image_tag=get("DEFAULT_IMAGE_TAG"),
            bypass_pull_for_local_images=bool(bypass) and bypass.lower() in TRUTHY,
            local_image_prefix=get("LOCAL_IMAGE_PREFIX"),
            default_kind=get("DEFAULT_KIND"),
        )
