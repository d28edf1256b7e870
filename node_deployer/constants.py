# node_deployer/constants.py

# Remote filesystem layout (source deployments)
DATA_ROOT = "/data"
BIN_DIR = f"{DATA_ROOT}/bin"
SCRIPTS_DIR = f"{DATA_ROOT}/scripts"
REPOS_DIR = f"{DATA_ROOT}/repos"
SHARED_DIR = f"{DATA_ROOT}/shared"
JWT_FILE = f"{SHARED_DIR}/jwt.hex"
SYSTEMD_DIR = "/etc/systemd/system"

# Group shared by execution and consensus service accounts (reads jwt.hex)
SHARED_GROUP = "eth"

# Local asset directories, relative to the Pulumi project root
UNIT_FILE_DIR = "systemd"
START_SCRIPT_DIR = "scripts"

# Kubernetes labels
LABEL_APP = "app"
LABEL_NAME = "app.kubernetes.io/name"
LABEL_PART_OF = "app.kubernetes.io/part-of"
LABEL_INSTANCE = "app.kubernetes.io/instance"
LABEL_MANAGED_BY = "app.kubernetes.io/managed-by"
MANAGED_BY = "node-deployer"

# Mounted identically into execution and consensus containers
JWT_SECRET_KEY = "jwt.hex"
JWT_MOUNT_PATH = "/etc/execution-jwt"

# Port conventions
CONSENSUS_P2P_PORT = 9000
EXECUTION_P2P_PORT = 30303
EXECUTION_METRICS_PORT = 9001
RPC_PORT = 8545
ENGINE_PORT = 8551

# Toolchain bootstrap scripts, all idempotent
TOOLCHAIN_INSTALLERS = {
    "rust": "curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh -s -- -y",
    "go": "sudo apt-get update -y && sudo apt-get install -y golang-go build-essential",
    "node": "sudo apt-get update -y && sudo apt-get install -y nodejs npm && sudo npm install -g yarn",
    "dotnet": "sudo apt-get update -y && sudo apt-get install -y dotnet-sdk-8.0",
    "cmake": "sudo apt-get update -y && sudo apt-get install -y git cmake build-essential",
    "java": "sudo apt-get update -y && sudo apt-get install -y openjdk-21-jdk",
}
