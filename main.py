from fastapi import FastAPI, Header, HTTPException, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from config import Config
from models import EvaluationResult, InboundMessage, LeadRecord, SmsWebhookPayload, WebhookResponse
from keyword_config import load_scoring_config
from lead_detector import LeadDetector
from lead_store import LeadStore
from dedup import ProcessedMessageCache
from notifier import send_lead_notification
from typing import List
import logging
import uvicorn
import datetime

# Setup Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("lead-detector-api")

app = FastAPI(title="SMS Lead Detector API")

from fastapi.middleware.cors import CORSMiddleware

# Dashboard is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Webhook senders get a plain 400 instead of FastAPI's 422 detail list.
    """
    if request.url.path.startswith("/webhook/"):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Missing required field: content"}
        )
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()}
    )

# Initialize modules. A broken scoring configuration stops the service here.
scoring_config = load_scoring_config(Config.SCORING_CONFIG_PATH)
detector = LeadDetector(scoring_config)
lead_store = LeadStore()
processed_messages = ProcessedMessageCache(Config.MAX_PROCESSED_MESSAGES)

async def verify_api_key(x_api_key: str = Header(None)):
    if x_api_key and x_api_key != Config.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API Key")
    return x_api_key

def to_inbound_message(payload: SmsWebhookPayload) -> InboundMessage:
    fields = {"rawText": payload.content}
    if payload.id:
        fields["id"] = payload.id
    if payload.timestamp:
        fields["timestamp"] = payload.timestamp
    return InboundMessage(**fields)

@app.post("/webhook/sms", response_model=WebhookResponse)
def sms_webhook(payload: SmsWebhookPayload, api_key: str = Depends(verify_api_key)):
    logger.info("[Webhook] Received SMS message")

    # Retried deliveries carry the same id
    if payload.id and processed_messages.check_and_add(payload.id):
        logger.info(f"[Webhook] Duplicate message {payload.id} ignored")
        return WebhookResponse(processed=False, id=payload.id, reason="duplicate message")

    message = to_inbound_message(payload)
    result = detector.evaluate(message)

    response_data = WebhookResponse(
        id=message.id,
        score=result.score,
        classification=result.classification,
        keywords=list(result.matchedKeywords),
    )

    if result.shouldForward:
        record = lead_store.add(result)
        logger.info(f"[Lead] Detected new lead (ID: {record.id}, Score: {result.score:.2f})")

        if send_lead_notification(result, record.id):
            lead_store.mark_notified(record.id)

        response_data.leadDetected = True
        response_data.leadId = record.id
    else:
        logger.info(f"[Filter] Message filtered out (Score: {result.score:.2f}, Reason: {result.filterReason})")
        response_data.reason = result.filterReason

    return response_data

@app.post("/api/evaluate", response_model=EvaluationResult)
def evaluate_endpoint(payload: SmsWebhookPayload, api_key: str = Depends(verify_api_key)):
    """Score a message without storing or notifying."""
    return detector.evaluate(to_inbound_message(payload))

@app.get("/api/leads", response_model=List[LeadRecord])
def list_leads():
    return lead_store.all()

@app.get("/api/leads/{lead_id}", response_model=LeadRecord)
def get_lead(lead_id: str):
    record = lead_store.get(lead_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return record

@app.get("/health")
def health_check():
    return {
        "status": "running",
        "service": "SMS Lead Detector",
        "timestamp": datetime.datetime.now().isoformat()
    }

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=Config.PORT, reload=True)
