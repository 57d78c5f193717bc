"""
Example: Typed extraction

This example asks the model for a number, an object, a list, a boolean and
a category, and prints the validated Python values.

Run with: python src/examples/typed_extraction_example.py

Requires OPENAI_API_KEY environment variable (or a .env file).
"""

import asyncio
import logging

from pydantic import BaseModel

from promptcast import ClientSettings, PromptClient, RequestOptions, PromptcastError
from promptcast import descriptors as d

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class Person(BaseModel):
    name: str
    age: int


async def main():
    client = PromptClient(ClientSettings.from_env())

    total = await client.as_type("what is 2+2", d.number())
    logger.info("2+2 = %s", total)

    person = await client.as_type(
        "hey i'm jose and i'm 42 years old",
        d.object_of(name=d.string(), age=d.number()),
    )
    logger.info("Person dict: %s", person)

    model = await client.as_type("my name is ada and i'm 36", Person)
    logger.info("Person model: %r", model)

    colors = await client.as_type(
        "my favorite colors are red and green",
        d.array_of(d.string(), "favorite colors"),
        RequestOptions(use_higher_capability_model=True),
    )
    logger.info("Colors: %s", colors)

    logger.info("Sky is blue: %s", await client.as_bool("the sky is blue"))

    color = await client.categorize("My favorite color is red", ["red", "blue", "green"])
    logger.info("Category: %s", color)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except PromptcastError as e:
        logger.error("Extraction failed: %s", e)
        raise
