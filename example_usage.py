"""
Simple usage example for Sahay

Shows the agent answering a text question, browsing a category and
checking an image, all from the offline knowledge base.
"""

import numpy as np

from sahay import SahayAgent


def show(card):
    print(f"[{card.title}]")
    for line in card.lines:
        print(f"  {line}")
    print()


def main():
    print("=" * 60)
    print("Sahay Simple Example")
    print("=" * 60)
    print()

    with SahayAgent() as agent:
        print("✓ Agent initialized!\n")

        # Example 1: Ask a question
        question = "I have chest pain"
        print(f"📝 Question: {question}\n")
        show(agent.submit(question))

        # Example 2: Browse a category
        print("📝 Women's health\n")
        show(agent.select_category("women"))

        # Example 3: A synthetic all-green snapshot
        print("📷 Image check\n")
        frame = np.zeros((40, 40, 3), dtype=np.uint8)
        frame[..., 1] = 200
        show(agent.capture_and_identify(frame))

    print("💡 To run the full CLI: sahay  (or: python -m sahay)")
    print("=" * 60)


if __name__ == "__main__":
    main()
