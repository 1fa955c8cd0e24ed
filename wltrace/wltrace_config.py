from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource


class WltraceConfig(BaseSettings):
    """
    General settings for wltrace. Pydantic will automatically populate this model from env vars
    or a wltrace_config.yaml file in the working directory.
    """
    seed: int | None = None
    """ Default seed for random trace generators that are not given one explicitly """

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    """ Level of the wltrace logger """

    model_config = SettingsConfigDict(
        yaml_file="wltrace_config.yaml",
        env_prefix='wltrace_',
        env_nested_delimiter='__',
        nested_model_default_partial_update=True,
    )

    # Customize setting sources, we'll use yaml config file instead of the default .env
    @classmethod
    def settings_customise_sources(
        cls, settings_cls,
        init_settings, env_settings, dotenv_settings, file_secret_settings,
    ):
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls),)


wltrace_config = WltraceConfig()
