import re

# Remote URL forms, tried in this order. All anchored.
SSH_REMOTE_RE = re.compile(r"^(?P<user>[^@/\s]+)@(?P<host>[^:/\s]+):(?P<repository>.+)$")
HTTPS_PORT_REMOTE_RE = re.compile(r"^https?://(?:[^@/\s]+@)?(?P<host>[^@:/\s]+):(?P<port>\d+)/(?P<repository>.+)$")
HTTPS_REMOTE_RE = re.compile(r"^https?://(?:[^@/\s]+@)?(?P<host>[^@/\s]+)/(?P<repository>.+)$")

DEFAULT_REMOTE = "origin"

# Pattern -> built-in style name. Order matters: first match wins.
BUILTIN_HOST_PATTERNS = (
    (r"github\.com", "github"),
    (r"gitlab\.com", "gitlab"),
    (r"codeberg\.org", "gitea"),
    (r"try\.gitea\.io", "gitea"),
    (r"bitbucket\.org", "bitbucket"),
    (r"git\.kernel\.org", "cgit"),
    (r"git\.savannah\.gnu\.org", "cgit"),
)

# Diagnostics
MSG_NO_FILE = "No file associated with current context"
MSG_NOT_IN_REPO = "Not in a git repository"
MSG_NO_REMOTE = "No git remote found"
MSG_PARSE_REMOTE = "Failed to parse remote URL"
MSG_NO_COMMIT = "Failed to get commit hash"
MSG_FILE_NOT_IN_REMOTE = "'{path}' not in remote '{remote}'"
MSG_NO_HOST = "No URL generator for host: {host}"
MSG_COMMIT_NOT_PUSHED = "Commit not in remote '{remote}' - push changes first"
MSG_UNCOMMITTED = "'{path}' has uncommitted changes - line numbers may be wrong"
