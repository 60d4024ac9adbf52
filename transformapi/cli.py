"""
Command-line front end: runs a transformation through the /transform
endpoint and saves the result to disk.

Usage:
    # Start the server first:
    #   uvicorn transformapi.main:create_app --factory --port 8000
    #
    # List transformations:
    #   transformapi list
    #
    # Run one:
    #   transformapi run LINE_ART --image data/demo.jpg
    #   transformapi run GEOMETRIZE --image data/demo.jpg --intensity 9
    #   transformapi run TEXT_TO_IMAGE --prompt "A wooden mandala carving"
"""

import argparse
import mimetypes
import os
import sys
import time

import httpx

from transformapi.config import server_url
from transformapi.dispatcher import TransformationResult
from transformapi.images import decode_image_b64, extension_for, sniff_mime_type
from transformapi.prompts import TransformationKind
from transformapi.state import (
    GenerationFailed,
    GenerationSucceeded,
    SelectKind,
    SelectModel,
    SetIntensity,
    SetPrompt,
    StartGeneration,
    UIState,
    UploadImage,
    reduce,
    to_request,
)


def result_from_response(data: dict) -> TransformationResult:
    if data["result_type"] == "image":
        return TransformationResult(
            result_type="image",
            model=data["model"],
            image=decode_image_b64(data["image_b64"]),
            mime_type=data["mime_type"],
            prompts=data.get("prompts", []),
        )
    return TransformationResult(
        result_type="text",
        model=data["model"],
        text=data["text"],
        prompts=data.get("prompts", []),
    )


def save_result(result: TransformationResult, out_dir: str) -> str:
    """Write the image or text to *out_dir* and return the path."""
    os.makedirs(out_dir, exist_ok=True)
    if result.is_image:
        path = os.path.join(out_dir, f"generated-image.{extension_for(result.mime_type)}")
        with open(path, "wb") as f:
            f.write(result.image)
    else:
        path = os.path.join(out_dir, "generated-text.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(result.text)
    return path


def generate(client: httpx.Client, state: UIState) -> UIState:
    """Submit the current selection and fold the outcome back into the state."""
    started = reduce(state, StartGeneration())
    if started.pending_request is None or started.pending_request == state.pending_request:
        return started
    state = started

    request_id = state.pending_request
    request = to_request(state)

    data = {"kind": request.kind.value, "model": request.model}
    if request.prompt:
        data["prompt"] = request.prompt
    if request.intensity is not None:
        data["intensity"] = str(request.intensity)
    files = None
    if request.image is not None:
        ext = mimetypes.guess_extension(request.mime_type) or ".png"
        files = {"image": (f"source{ext}", request.image, request.mime_type)}

    try:
        resp = client.post("/transform", data=data, files=files)
    except httpx.TransportError as e:
        return reduce(state, GenerationFailed(request_id, f"Server not reachable: {e}"))

    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    if resp.status_code != 200 or payload.get("status") != "ok":
        detail = payload.get("detail", resp.text[:300])
        return reduce(state, GenerationFailed(request_id, str(detail)))

    return reduce(state, GenerationSucceeded(request_id, result_from_response(payload)))


def cmd_list(client: httpx.Client) -> int:
    resp = client.get("/transformations")
    resp.raise_for_status()
    for info in resp.json():
        flags = []
        if info["produces_text"]:
            flags.append("text")
        if info["supports_intensity"]:
            flags.append("intensity")
        if not info["requires_image"]:
            flags.append("prompt")
        print(f"  {info['kind']:<18} {info['label']:<15} {', '.join(info['models'])}  [{' '.join(flags)}]")
    return 0


def cmd_run(client: httpx.Client, args: argparse.Namespace) -> int:
    try:
        kind = TransformationKind.parse(args.kind)
    except ValueError:
        print(f"Error: unknown transformation '{args.kind}'.")
        return 2

    state = reduce(UIState(), SelectKind(kind))
    if args.model:
        state = reduce(state, SelectModel(args.model))
        if state.model != args.model:
            print(f"Error: model '{args.model}' is not available for {kind.value}.")
            return 2
    if args.intensity is not None:
        state = reduce(state, SetIntensity(args.intensity))
    if args.prompt:
        state = reduce(state, SetPrompt(args.prompt))
    if args.image:
        if not os.path.exists(args.image):
            print(f"Error: {args.image} not found.")
            return 2
        with open(args.image, "rb") as f:
            image_data = f.read()
        try:
            mime_type = sniff_mime_type(image_data)
        except ValueError as e:
            print(f"Error: {e}")
            return 2
        state = reduce(state, UploadImage(image_data, mime_type))

    print(f"\n{'=' * 60}")
    print(f"  Transformation: {kind.value}")
    print(f"  Model:          {state.model}")
    print(f"{'=' * 60}")

    start = time.time()
    state = generate(client, state)
    elapsed = time.time() - start

    if state.error:
        print(f"  FAILED: {state.error}")
        return 1

    path = save_result(state.result, args.out)
    print(f"  Type:   {state.result.result_type}")
    print(f"  Time:   {elapsed:.1f}s")
    if not state.result.is_image:
        print(f"  Text:\n{state.result.text}")
    print(f"  Saved:  {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transformapi", description=__doc__.split("\n\n")[0].strip())
    parser.add_argument("--server", default=None, help="API base URL (default: $TRANSFORMAPI_SERVER)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List available transformations")

    run = sub.add_parser("run", help="Run a transformation")
    run.add_argument("kind", help="Transformation, e.g. LINE_ART or TEXT_TO_IMAGE")
    run.add_argument("--image", help="Source image path")
    run.add_argument("--prompt", help="Prompt for TEXT_TO_IMAGE")
    run.add_argument("--intensity", type=int, help="1-10, for CLARITY_BOOST / PATTERNIZE / GEOMETRIZE")
    run.add_argument("--model", help="Model override")
    run.add_argument("--out", default="data", help="Output directory")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    server = args.server or server_url()

    with httpx.Client(base_url=server, timeout=600.0) as client:
        # Check server is up
        try:
            client.get("/health", timeout=5.0).raise_for_status()
        except httpx.HTTPError:
            print(f"Error: server not reachable at {server}. Start it first:")
            print("  uvicorn transformapi.main:create_app --factory --port 8000")
            return 1

        if args.command == "list":
            return cmd_list(client)
        return cmd_run(client, args)


if __name__ == "__main__":
    sys.exit(main())
