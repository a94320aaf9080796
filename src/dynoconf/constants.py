APP_NAME = "dynoconf"
ENV_PREFIX = "DYNOCONF_"

DEFAULT_CONFIG_PATH = "dyn-config.json"
STORE_KEY_SEPARATOR = "_CONFIG_"
