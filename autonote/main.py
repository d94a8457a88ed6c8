"""Interactive main entry point for turning recordings into notes."""

import asyncio
import sys
from pathlib import Path
from typing import Optional, Tuple
from tqdm import tqdm

from autonote.config import Config
from autonote.models import Note
from autonote.pipeline import STEP_LABELS, process_recording, slugify_title
from autonote.speechmatics import SpeechmaticsClient
from autonote.storage import NoteStore
from autonote.timeline import timeline_preview
from autonote.writers.json_writer import write_json
from autonote.writers.summary_writer import write_summary
from autonote.writers.txt_writer import write_txt


def process_file(audio_path: Path, language: Optional[str] = None) -> Tuple[Path, Note]:
    """
    Process a single recording: transcribe, summarize, save and write outputs.

    Args:
        audio_path: Path to the recording
        language: Transcription language code

    Returns:
        Tuple of (output_dir, note)
    """
    client = SpeechmaticsClient()
    store = NoteStore()

    with tqdm(total=Config.MAX_POLL_ATTEMPTS, desc="Polling", unit="poll", leave=False) as pbar:

        shown = set()

        def show_step(index: int) -> None:
            if index < len(STEP_LABELS) and index not in shown:
                shown.add(index)
                pbar.write(STEP_LABELS[index])

        def show_status(status: str) -> None:
            pbar.set_postfix_str(status)
            pbar.update(1)

        note = asyncio.run(process_recording(
            audio_path,
            client,
            store=store,
            on_step=show_step,
            on_status=show_status,
            language=language,
        ))

    output_dir = Config.OUT_DIR / slugify_title(note.title)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Writing note files...")
    write_json(note, output_dir / "note.json")
    write_txt(note, output_dir / "transcript.txt", chunk_size=Config.CHUNK_SIZE)
    write_summary(note, output_dir / "summary.md")
    return output_dir, note


def print_note(note: Note) -> None:
    print("=" * 60)
    print(note.title)
    print("=" * 60)
    if note.timeline:
        print(f"Timeline: {timeline_preview(note.timeline)}")
        print()
    print(note.summary)
    if note.key_points:
        print()
        print("Key points:")
        for point in note.key_points:
            print(f"  - {point}")
    if note.action_items:
        print()
        print("Actions:")
        for action in note.action_items:
            print(f"  - {action}")
    print("=" * 60)


def main():
    """Interactive main function."""
    print("=" * 60)
    print("Audio Notes")
    print("=" * 60)
    print()

    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        print(f"✗ Configuration Error: {str(e)}", file=sys.stderr)
        print("\nPlease create a .env file with your SPEECHMATICS_API_KEY.")
        sys.exit(1)

    if not Config.OPENAI_API_KEY:
        print("⚠ OPENAI_API_KEY not set, notes will be saved without a summary.")

    Config.OUT_DIR.mkdir(parents=True, exist_ok=True)

    while True:
        print()
        print("-" * 60)
        raw_path = input("Path of the recording to process: ").strip().strip('"')

        if not raw_path:
            print("No file provided. Exiting...")
            break

        audio_path = Path(raw_path).expanduser()
        if not audio_path.is_file():
            print(f"✗ File not found: {audio_path}")
            continue

        language = input(f"Language code [{Config.LANGUAGE}]: ").strip() or Config.LANGUAGE

        print()
        print("Processing recording...")
        print()

        try:
            output_dir, note = process_file(audio_path, language=language)

            print()
            print_note(note)
            print(f"✓ Files saved to: {output_dir}")

        except Exception as e:
            print()
            print("=" * 60)
            print(f"✗ Processing failed: {str(e)}")
            print("=" * 60)

        print()
        another = input("Would you like to process another recording? (y/n): ").strip().lower()
        if another not in ('y', 'yes'):
            break

    print()
    print("Done.")


if __name__ == "__main__":
    main()
