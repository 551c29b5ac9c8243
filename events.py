# Client -> server
JOIN = "join"
CODE_CHANGE = "codeChange"
FILE_CHANGE = "file:change"
TYPING = "typing"
LANGUAGE_CHANGE = "languageChange"
COMPILE_CODE = "compileCode"

# Server -> client
CODE_UPDATE = "codeUpdate"          # code:string
USER_JOINED = "userJoined"          # users:string[] membership snapshot
FILE_REFRESH = "file:refresh"       # no payload, re-fetch GET /files
USER_TYPING = "userTyping"          # userName:string
LANGUAGE_UPDATE = "languageUpdate"  # language:string
CODE_RESPONSE = "codeResponse"      # provider response or {run: {output: "Error: ..."}}

# Frame shape on the wire: {"event": <name>, "data": <payload>}
EVENT_KEY = "event"
DATA_KEY = "data"
