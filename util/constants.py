class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    HEALTHZ = "/healthz"
    SESSION = V1 + "/session"
    API_KEY = SESSION + "/api-key"
    UPLOAD = SESSION + "/upload"
    TRACK = SESSION + "/track"
    STOP = SESSION + "/stop"
    STATE = SESSION + "/state"
    CLAIMS = SESSION + "/claims"
    SUMMARY = SESSION + "/summary"
    VERIFY_CLAIM = CLAIMS + "/{claim_id}/verify"
    SKIP_CLAIM = CLAIMS + "/{claim_id}/skip"
    CLAIM_SUGGESTIONS = CLAIMS + "/{claim_id}/suggestions"


class ExternalURIs:
    VALIDATE_API_KEY = "/validate-api-key"
    UPLOAD_PAPER = "/upload-paper"
    STREAM_CLAIM = "/stream-claim"
    VERIFY_CLAIM = "/verify-claim"
    SUGGEST_CITATIONS = "/suggest-citations"
