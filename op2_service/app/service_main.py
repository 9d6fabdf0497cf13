#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import logging, tempfile, os
from pathlib import Path
from sqlizer.errors import SinkError, SqlizerError
from sqlizer.pipeline import LoadStats, StreamLoader
from sqlizer.settings import LoaderSettings
from sqlizer.sinks import SqliteStatementSink

app = FastAPI(title="JSON Sqlizer OP2")
logger = logging.getLogger(__name__)

upload_counter = Counter("sqlizer_uploads_total", "Total JSON uploads")
upload_duration = Histogram("sqlizer_upload_seconds", "Time spent loading an upload")

CHUNK_SIZE = 8*1024*1024  # 8 MB


def load_file(path: str, settings: LoaderSettings) -> LoadStats:
    with SqliteStatementSink(settings.database) as sink:
        return StreamLoader(sink, settings).load_path(path)


@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}


@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/load/file", tags=["load"])
async def load_upload(file: UploadFile = File(...)):
    upload_counter.inc()
    settings = LoaderSettings.from_env()
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as tmp:
        total = 0
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            tmp.write(chunk)
            total += len(chunk)
        tmp_path = tmp.name
    try:
        with upload_duration.time():
            stats = await run_in_threadpool(load_file, tmp_path, settings)
    except SinkError as e:
        logger.info(f"load of {file.filename} failed in the database")
        raise HTTPException(status_code=500, detail=str(e))
    except SqlizerError as e:
        logger.info(f"load of {file.filename} rejected")
        raise HTTPException(status_code=422, detail=str(e))
    finally:
        Path(tmp_path).unlink()
    body = {"filename": file.filename, "bytes": total}
    body.update(stats.as_dict())
    return JSONResponse(body)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
