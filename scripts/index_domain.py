"""
Load documents into one domain's embeddings collection.

Usage:
    python scripts/index_domain.py courses data/courses.jsonl [--init]

Each input line is a JSON object: {"text": "...", "metadata": {...}}.
"""

import argparse
import asyncio
import json
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from wwah_search.db.session import database
from wwah_search.domains import Domain
from wwah_search.embeddings.embedder import Embedder
from wwah_search.search.accessor import VectorStoreAccessor


def read_documents(path):
    texts, metadatas = [], []
    with open(path, encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            text = (record.get("text") or "").strip()
            # Skip very short content
            if len(text) < 10:
                print(f"Skipping line {line_no}: text too short")
                continue
            texts.append(text)
            metadatas.append(record.get("metadata") or {})
    return texts, metadatas


async def main(domain: Domain, path: str, init: bool, batch_size: int):
    if init:
        print("Creating extension and tables...")
        await database.init_models()

    accessor = VectorStoreAccessor(database, Embedder())
    handle = await accessor.get_domain_handle(domain)

    texts, metadatas = read_documents(path)
    if not texts:
        print("No documents to index.")
        return

    print(f"Indexing {len(texts)} documents into {handle.collection_name}...")
    written = 0
    for start in range(0, len(texts), batch_size):
        batch = slice(start, start + batch_size)
        print(f"Embedding batch {start}-{start + len(texts[batch])}...")
        written += await handle.add_documents(texts[batch], metadatas[batch])

    total = await handle.count_documents()
    print(f"Done! Wrote {written} documents; collection now holds {total}.")
    await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("domain", choices=[d.value for d in Domain])
    parser.add_argument("path")
    parser.add_argument("--init", action="store_true", help="create tables first")
    parser.add_argument("--batch-size", type=int, default=100)
    args = parser.parse_args()

    asyncio.run(main(Domain(args.domain), args.path, args.init, args.batch_size))
