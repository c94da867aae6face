"""Prioritised model candidates for review acquisition."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from review_insights.providers.base import ReviewProvider

logger = logging.getLogger(__name__)


class ModelCatalog:
	"""Decides which models to try, and in what order, for one provider.

	Listing goes through the provider. When it raises or returns nothing in the
	provider's family, the hardcoded fallback list is used instead. Listed
	models that also appear in the fallback list come first, in fallback
	order. A non-empty ``preferred`` list skips listing entirely.
	"""

	def __init__(
		self,
		provider: ReviewProvider,
		fallback: Sequence[str],
		preferred: Sequence[str] = (),
	) -> None:
		self.provider = provider
		self.fallback = list(fallback)
		self.preferred = list(preferred)

	def list_candidates(self) -> list[str]:
		if self.preferred:
			return list(self.preferred)

		try:
			listed = self.provider.list_models()
		except Exception as exc:
			logger.warning("Model listing failed for %s: %s. Using fallback list.", self.provider.name, exc)
			return list(self.fallback)

		family = self.provider.model_family
		usable = {name for name in listed if name and family in name}
		# Known-good models keep their fallback priority; the rest follow by name.
		ranked = [name for name in self.fallback if name in usable]
		candidates = ranked + sorted(usable.difference(ranked))
		if not candidates:
			logger.warning("No usable %s models listed. Using fallback list.", self.provider.name)
			return list(self.fallback)

		logger.info("Available %s models: %s", self.provider.name, ", ".join(candidates))
		return candidates
