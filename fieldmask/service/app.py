import argparse
import os
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from fieldmask.config_loader import get_engine, get_engine_lock


def create_app(config_path: Optional[str] = None, aggregate_errors: bool = False) -> FastAPI:
    """Create the FastAPI app around one shared root MaskingEngine.

    Sync endpoints run in a thread pool and strategies keep internal state,
    so calls into the engine are serialised with the lock cached beside it.
    """

    engine = get_engine(config_path, aggregate_errors)
    lock = get_engine_lock(config_path, aggregate_errors)
    app = FastAPI(title="Field Masking Service", version="1.0.0")

    class JsonReq(BaseModel):
        payload: Any

    class RecordError(BaseModel):
        index: int
        error: str

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/mask/json")
    def mask_json(req: JsonReq):
        """Mask one record or a list of records.

        Failed fields are removed from the returned records and listed in
        ``errors``.
        """
        batch = isinstance(req.payload, list)
        records = req.payload if batch else [req.payload]
        if not all(isinstance(r, dict) for r in records):
            raise HTTPException(status_code=400, detail="payload must be a record or a list of records")

        masked: List[Any] = []
        errors: List[RecordError] = []
        for i, rec in enumerate(records):
            with lock:
                out, err = engine.mask_record(rec)
            masked.append(out)
            if err is not None:
                errors.append(RecordError(index=i, error=str(err)))
        return {"masked_json": masked if batch else masked[0], "errors": errors}

    # Expose internals for reuse/tests
    app.state.engine = engine
    app.state.lock = lock
    app.state.mask_json = mask_json
    app.state.JsonReq = JsonReq

    return app


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the field masking API")
    parser.add_argument(
        "--config",
        default=os.getenv("FIELDMASK_CONFIG_PATH", "masking.yml"),
        help="Path to masking configuration file",
    )
    parser.add_argument("--host", default=os.getenv("SERVICE_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("SERVICE_PORT", "8000")))
    parser.add_argument("--all-errors", action="store_true")
    args = parser.parse_args()

    app = create_app(args.config, args.all_errors)
    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port)
