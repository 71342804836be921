import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import activity_share.lib.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='StorageContext',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('level', models.CharField(choices=[('course', 'Course'), ('module', 'Activity module')], max_length=32)),
                ('instance_id', models.PositiveBigIntegerField()),
            ],
            options={
                'verbose_name': 'Storage Context',
                'verbose_name_plural': 'Storage Contexts',
            },
        ),
        migrations.CreateModel(
            name='StoredFile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('component', models.CharField(max_length=100)),
                ('filearea', models.CharField(max_length=50)),
                ('itemid', models.CharField(max_length=64)),
                ('filename', models.CharField(max_length=255)),
                ('content_hash', models.CharField(blank=True, db_index=True, editable=False, max_length=40)),
                ('size', models.PositiveBigIntegerField(validators=[django.core.validators.MaxValueValidator(1073741824)])),
                ('created', models.DateTimeField(validators=[activity_share.lib.fields.validate_utc_datetime])),
                ('modified', models.DateTimeField(validators=[activity_share.lib.fields.validate_utc_datetime])),
                ('context', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='as_files.storagecontext')),
            ],
            options={
                'verbose_name': 'Stored File',
                'verbose_name_plural': 'Stored Files',
            },
        ),
        migrations.AddConstraint(
            model_name='storagecontext',
            constraint=models.UniqueConstraint(fields=('level', 'instance_id'), name='as_files_uniq_ctx_level_instance'),
        ),
        migrations.AddConstraint(
            model_name='storedfile',
            constraint=models.UniqueConstraint(fields=('context', 'component', 'filearea', 'itemid', 'filename'), name='as_files_uniq_storedfile_path'),
        ),
    ]
