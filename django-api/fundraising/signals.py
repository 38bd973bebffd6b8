"""Keep derived donation aggregates in step with the donation ledger.

Receivers run inside the caller's transaction, so an aggregate is never
committed without the donation change that produced it.
"""

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from fundraising.domain import DonorId, ParticipantId
from fundraising.models import Donation
from fundraising.stores.django_store import DjangoCampaignStore, DjangoDonorStore


@receiver(pre_save, sender=Donation)
def remember_previous_attribution(sender, instance, **kwargs):
    """Stash the donor and participant a donation belonged to before this save."""
    if instance._state.adding:
        instance._previous_donor_id = None
        instance._previous_participant_id = None
        return
    previous = Donation.objects.filter(pk=instance.pk).values("donor_id", "participant_id").first()
    instance._previous_donor_id = previous["donor_id"] if previous else None
    instance._previous_participant_id = previous["participant_id"] if previous else None


@receiver(post_save, sender=Donation)
def refresh_totals_on_save(sender, instance, created, **kwargs):
    donors = DjangoDonorStore()
    for donor_id in {instance.donor_id, getattr(instance, "_previous_donor_id", None)} - {None}:
        donors.refresh_aggregates(DonorId(donor_id))

    if created and getattr(instance, "_participant_credited", False):
        return
    campaigns = DjangoCampaignStore()
    previous = getattr(instance, "_previous_participant_id", None)
    for participant_id in {instance.participant_id, previous} - {None}:
        campaigns.recompute_participant(ParticipantId(participant_id))


@receiver(post_delete, sender=Donation)
def refresh_totals_on_delete(sender, instance, **kwargs):
    if instance.donor_id:
        DjangoDonorStore().refresh_aggregates(DonorId(instance.donor_id))
    if instance.participant_id:
        DjangoCampaignStore().recompute_participant(ParticipantId(instance.participant_id))
