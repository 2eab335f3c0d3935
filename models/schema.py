# Centralized collection names and document path patterns to prevent drift.

COL_SYSTEM = "system"
DOC_HEALTHZ = "healthz"

COL_TOPICS = "topics"
COL_PACKAGES = "packages"
COL_CONVERSATIONS = "conversations"  # topics/{topicID}/conversations/{conversationID}

PATH_TOPIC = "topics/{topicID}"
PATH_PACKAGE = "packages/{packageID}"
PATH_CONVERSATION = "topics/{topicID}/conversations/{conversationID}"

# Kinds accepted by /reindex/{kind}
KIND_TOPICS = "topics"
KIND_PACKAGES = "packages"
KIND_CONVERSATIONS = "conversations"
