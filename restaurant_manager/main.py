"""Entry point for the restaurant manager Textual console."""

from __future__ import annotations

from restaurant_manager.restaurant_app import RestaurantApp


def main() -> None:
    """Run the Textual application."""
    RestaurantApp().run()


if __name__ == "__main__":
    main()
