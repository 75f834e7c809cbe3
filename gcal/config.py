import json
import logging
import os

"""
Reading of the configuration file used by get_service().

The file is JSON (or YAML, if pyyaml is installed) with one object per
section:

    {
        "default": {"gcal_user": "someone@gmail.com", "gcal_pass": "secret"},
        "work": {"inherits": "default", "gcal_user": "someone@example.com"}
    }
"""

log = logging.getLogger("gcal")


def config_section(config, section="default"):
    """
    Returns the section as a dict.  A section may inherit the values of
    another section through the "inherits" key, its own values win.
    """
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn):
    """
    Reads the config file fn.  Without fn, the default locations are
    tried in order and the first non-empty config is returned (or
    None).  A missing or broken file gives an empty config.
    """
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/gcal/calendar.conf",
            f"{cfgdir}/gcal/calendar.yaml",
            f"{cfgdir}/gcal/calendar.json",
            "/etc/gcal/calendar.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## Late import, yaml is an optional dependency
            try:
                import yaml
            except ImportError:
                log.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )
                return {}
            try:
                with open(fn, "rb") as config_file:
                    return yaml.safe_load(config_file) or {}
            except yaml.YAMLError:
                log.error(
                    f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                )
    except FileNotFoundError:
        log.info(f"no config file found at {fn}")
    except (ValueError, OSError):
        log.error("error in config file.  It will be ignored", exc_info=True)
    return {}
