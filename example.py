#!/usr/bin/env python3
"""Example usage of the etupedia library."""

from pathlib import Path

from etupedia import Config, ScraperManager


def main():
    """Search Wikipedia and save the best match as JSON."""

    print("etupedia Example: searching French Wikipedia for 'tour Eiffel'")
    print("=" * 70)

    query = "la tour Eiffel"
    output_dir = Path("./example_output")

    try:
        manager = ScraperManager(Config(default_language="fr"))

        # Step 1: Search
        print("\n1. Searching...")
        language = manager.get_scraper("wikipedia").detect_language(query)
        results = manager.search(query, language=language)
        if not results:
            print("   ✗ No results")
            return 1

        print(f"   ✓ Found {len(results)} results (language: {language})")
        for result in results[:5]:
            print(f"     {result.relevance_score:6.2f}  {result.title}")

        # Step 2: Fetch the top result
        print("\n2. Fetching article...")
        article = manager.scrape_article(results[0].slug, "wikipedia", language)
        if article is None:
            print("   ✗ Article not found")
            return 1

        print(f"   ✓ {article.title}: {len(article.sections)} top-level sections")
        print(f"   ✓ {len(article.images)} images, "
              f"{len(article.reference_sections or [])} reference sections")

        # Step 3: Save
        print("\n3. Saving...")
        output_dir.mkdir(parents=True, exist_ok=True)
        article_file = output_dir / f"{results[0].slug}.json"
        with open(article_file, 'w', encoding='utf-8') as f:
            f.write(article.to_json())
        print(f"   ✓ Article saved to: {article_file}")

        print("\n" + "=" * 70)
        print("✅ Example completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Error: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
