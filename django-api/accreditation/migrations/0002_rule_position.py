from django.db import migrations, models


def backfill_positions(apps, schema_editor):
    for model_name in ("QuotaRule", "ZoneRule"):
        model = apps.get_model("accreditation", model_name)
        counters = {}
        for row in model.objects.order_by("created_at", "pk"):
            counters[row.event_id] = counters.get(row.event_id, 0) + 1
            row.position = counters[row.event_id]
            row.save(update_fields=["position"])


class Migration(migrations.Migration):

    dependencies = [
        ("accreditation", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="quotarule",
            name="position",
            field=models.PositiveIntegerField(default=0, editable=False),
        ),
        migrations.AddField(
            model_name="zonerule",
            name="position",
            field=models.PositiveIntegerField(default=0, editable=False),
        ),
        migrations.RunPython(backfill_positions, migrations.RunPython.noop),
        migrations.AlterModelOptions(
            name="quotarule",
            options={"ordering": ["created_at", "position"]},
        ),
        migrations.AlterModelOptions(
            name="zonerule",
            options={"ordering": ["created_at", "position"]},
        ),
    ]
