APP_NAME = "scripthost"
APP_AUTHOR = "scripthost"
PROFILES_FILENAME = "profiles.json"
LOG_FILENAME = "host.log"
