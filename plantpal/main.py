import sys
import asyncio
import logging
import argparse

from plantpal import config
from plantpal.agent.models import DiagnosisReport
from plantpal.catalog import is_known_plant_type
from plantpal.errors import CaptureError, MissingApiKey
from plantpal.pipe import DiagnosisSession, Outcome
from plantpal.vision.camera import CameraSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plantpal",
        description="Describe your plant's symptoms and get a diagnosis from Plant Pal.",
    )
    parser.add_argument("description", help="What is wrong with the plant (required)")
    parser.add_argument("--plant-type", default=None, help="e.g. 'Tomato' or 'Monstera'")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--image", default=None, help="Path to a png/jpeg/webp photo of the plant")
    source.add_argument("--camera", action="store_true", help="Take one photo with the configured camera")
    parser.add_argument("--sample", action="store_true", help="Return the bundled sample report (no API call)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


def format_report(report: DiagnosisReport) -> str:
    lines = ["Diagnosis Summary", report.summary, ""]
    for disease in report.possible_diseases:
        lines.append(f"== {disease.disease_name} ==")
        lines.append(disease.description)
        lines.append("Remedies:")
        lines.extend(f"  - {remedy}" for remedy in disease.remedies)
        lines.append("Prevention:")
        lines.extend(f"  - {tip}" for tip in disease.prevention)
        lines.append("")
    return "\n".join(lines)


def make_diagnoser(use_sample: bool):
    if use_sample:
        from plantpal.sample import SampleDiagnoser
        return SampleDiagnoser()
    from plantpal.agent.core import GeminiDiagnoser
    return GeminiDiagnoser()


def take_photo(camera_index: int = None) -> bytes:
    camera = CameraSession(camera_index=camera_index)
    try:
        camera.open()
        return camera.capture()
    except CaptureError:
        if camera.error:
            print(camera.error, file=sys.stderr)
        raise
    finally:
        camera.close()



def run(argv=None, diagnoser=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        session = DiagnosisSession(diagnoser or make_diagnoser(args.sample))
    except MissingApiKey as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    session.description = args.description
    if args.plant_type and not is_known_plant_type(args.plant_type):
        logger.info("Plant type %r is not in the catalog, sending it as free text", args.plant_type)
    session.plant_type = args.plant_type

    if args.image:
        try:
            with open(args.image, "rb") as f:
                session.set_image(f.read())
        except OSError as e:
            print(f"❌ Could not read image: {e}", file=sys.stderr)
            return 1
    elif args.camera:
        try:
            session.set_image(take_photo())
        except CaptureError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1

    outcome = asyncio.run(session.submit())
    if outcome == Outcome.REJECTED:
        print(session.error, file=sys.stderr)
        return 2
    if outcome == Outcome.FAILED:
        print(session.error, file=sys.stderr)
        return 1

    if args.json:
        print(session.report.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_report(session.report))
    return 0


def main():
    logging.basicConfig(level=config.LOG_LEVEL)
    sys.exit(run())


if __name__ == "__main__":
    main()
