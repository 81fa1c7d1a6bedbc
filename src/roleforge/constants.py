# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "naming": "roleforge.builder.naming",
    "gen": "roleforge.builder.generate",
    "asm": "roleforge.builder.assemble",
    "sched": "roleforge.builder.schedule",
    "docker": "roleforge.builder.backend",
    "conf": "roleforge.config",
    "fs": "roleforge.utils.fs",
}

LOG_LEVELS_ENV = "ROLEFORGE_LOG_LEVELS"


# --- Filenames ---
DOCKERFILE_NAME = "Dockerfile"
RUN_SCRIPT_NAME = "run.sh"
JOB_DESCRIPTOR_NAME = "job.MF"
JOB_MONIT_NAME = "monit"
JOB_TEMPLATES_DIR = "templates"
IMAGE_ROOT_DIR = "root"

# Files in a job directory that are build-time metadata only and never ship
EXCLUDED_JOB_FILES = frozenset({JOB_DESCRIPTOR_NAME})

# Name prefixes (case-insensitive) identifying license files
LICENSE_PREFIXES = ("license", "licence", "copying", "notice")


# --- Paths inside the role image ---
OPT_ROOT = "/opt/hcf"
RUN_SCRIPT_PATH = f"{OPT_ROOT}/{RUN_SCRIPT_NAME}"
STARTUP_DIR = f"{OPT_ROOT}/startup"
DOC_DIR = f"{OPT_ROOT}/share/doc"
MONITRC_TEMPLATE_PATH = f"{OPT_ROOT}/monitrc.erb"
MONITRC_PATH = "/etc/monitrc"
CONFIGGIN_PATH = f"{OPT_ROOT}/configgin/configgin"

VCAP_ROOT = "/var/vcap"
JOBS_SRC_DIR = f"{VCAP_ROOT}/jobs-src"
JOBS_DIR = f"{VCAP_ROOT}/jobs"
PACKAGES_DIR = f"{VCAP_ROOT}/packages"

# Relative to a job's jobs-src directory
PROPERTIES_TEMPLATE = "templates/data/properties.sh.erb"

RUN_SCRIPT_MODE = 0o744
STARTUP_SCRIPT_MODE = 0o755


# --- Image naming ---
ROLE_BASE_SUFFIX = "role-base"

# Role names become image name components and output directory names
ROLE_NAME_PATTERN = r"[a-z0-9][a-z0-9_.-]*"
IMAGE_MAINTAINER = "roleforge"


# --- Builder defaults ---
DEFAULT_CONFIG_STORE_ADDRESS = "http://127.0.0.1:8500"
DEFAULT_CONFIG_STORE_PREFIX = "hcf"
DEFAULT_WORKER_COUNT = 1
