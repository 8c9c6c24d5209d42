import asyncio

from fastapi import FastAPI, HTTPException, Response
import uvicorn

app = FastAPI()

OK_PAYLOAD = """<?xml version="1.0" encoding="UTF-8"?>
<CheckResponse>
  <minorVersion>1</minorVersion>
  <application>
    <longName>Vehicle Gateway</longName>
    <shortName>vgw</shortName>
    <componentVersion>4.2.0</componentVersion>
    <success>true</success>
    <check>
      <name>database</name>
      <success>true</success>
    </check>
    <check>
      <name>message-queue</name>
      <success>true</success>
    </check>
  </application>
</CheckResponse>
"""

FAILED_PAYLOAD = """<?xml version="1.0" encoding="UTF-8"?>
<CheckResponse>
  <minorVersion>1</minorVersion>
  <application>
    <longName>Vehicle Gateway</longName>
    <shortName>vgw</shortName>
    <componentVersion>4.2.0</componentVersion>
    <success>true</success>
    <check>
      <name>database</name>
      <success>false</success>
      <failureReason>connection pool exhausted</failureReason>
    </check>
  </application>
</CheckResponse>
"""

EMPTY_PAYLOAD = """<?xml version="1.0" encoding="UTF-8"?>
<CheckResponse>
  <minorVersion>1</minorVersion>
</CheckResponse>
"""

BROKEN_PAYLOAD = "<CheckResponse><application><success>maybe</success>"

PAYLOADS = {
    "ok": OK_PAYLOAD,
    "failed": FAILED_PAYLOAD,
    "empty": EMPTY_PAYLOAD,
    "broken": BROKEN_PAYLOAD,
}

SLOW_DELAY_SECONDS = 2.0


@app.get("/status")
async def status(scenario: str = "ok"):
    scenario = scenario.lower()
    if scenario == "error":
        raise HTTPException(status_code=503, detail="Service unavailable")
    if scenario == "slow":
        await asyncio.sleep(SLOW_DELAY_SECONDS)
        return Response(content=OK_PAYLOAD, media_type="application/xml")
    if scenario not in PAYLOADS:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return Response(content=PAYLOADS[scenario], media_type="application/xml")


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)
