import requests
import json
import uuid

BASE_URL = "http://localhost:3005"
API_KEY = "test_key_123"

SAMPLE_MESSAGES = [
    "From: +15551234567 - Hi, I need a private chef for a dinner party next Saturday for 10 people. What are your rates?",
    "From: +15552223333 - Do you cook for events? We have a gathering next week.",
    "From: +15554445555 - Can you provide your menu options for a wedding reception?",
    "From: +15556667777 - Just checking in about that thing we discussed last week.",
    "From: +15558889999 - UNSUBSCRIBE to stop receiving these promotional messages.",
]

def run_simulation():
    print("🚀 Sending sample SMS messages to the lead detector")
    print("---------------------------------------------------")

    headers = {
        "x-api-key": API_KEY,
        "Content-Type": "application/json"
    }

    for index, text in enumerate(SAMPLE_MESSAGES, start=1):
        payload = {"id": f"sim-{uuid.uuid4()}", "content": text}
        print(f"\n📩 [Message {index}] {text}")
        try:
            resp = requests.post(f"{BASE_URL}/webhook/sms", json=payload, headers=headers, timeout=10)
            data = resp.json()
        except requests.RequestException as e:
            print(f"❌ Error: {e}")
            return

        verdict = "LEAD" if data.get("leadDetected") else "NOT A LEAD"
        print(f"   {verdict} | score={data.get('score')} | {data.get('classification')}")
        if data.get("keywords"):
            print(f"   Keywords: {', '.join(data['keywords'])}")
        if data.get("reason"):
            print(f"   Reason: {data['reason']}")

    # Replaying an id must be ignored
    replay = {"id": "sim-replay", "content": SAMPLE_MESSAGES[0]}
    requests.post(f"{BASE_URL}/webhook/sms", json=replay, headers=headers, timeout=10)
    resp = requests.post(f"{BASE_URL}/webhook/sms", json=replay, headers=headers, timeout=10)
    print("\n🔁 Replayed delivery:")
    print(json.dumps(resp.json(), indent=2))

    leads = requests.get(f"{BASE_URL}/api/leads", timeout=10).json()
    print(f"\n✅ Stored leads: {len(leads)}")

if __name__ == "__main__":
    run_simulation()
