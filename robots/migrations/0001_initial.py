# Generated manually

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('sites', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RobotsOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=191)),
                ('value', models.JSONField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='robots_options', to='sites.site')),
            ],
            options={
                'db_table': 'robots_options',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['site', 'name'], name='robots_opt_site_name_idx')],
                'unique_together': {('site', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Page',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wp_post_id', models.IntegerField(help_text='Content item ID on the site')),
                ('url', models.URLField(blank=True)),
                ('title', models.CharField(blank=True, max_length=500)),
                ('slug', models.SlugField(blank=True, max_length=500)),
                ('post_type', models.CharField(default='page', help_text='Content type on the site: page, post, product, ...', max_length=50)),
                ('status', models.CharField(choices=[('publish', 'Published'), ('draft', 'Draft'), ('private', 'Private')], default='publish', max_length=20)),
                ('last_synced_at', models.DateTimeField(auto_now=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pages', to='sites.site')),
            ],
            options={
                'db_table': 'pages',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['site', 'post_type'], name='pages_site_type_idx')],
                'unique_together': {('site', 'wp_post_id')},
            },
        ),
        migrations.CreateModel(
            name='RobotsOverride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('noindex', models.BooleanField(default=False)),
                ('nofollow', models.BooleanField(default=False)),
                ('noarchive', models.BooleanField(default=False)),
                ('nosnippet', models.BooleanField(default=False)),
                ('noimageindex', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('page', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='robots_override', to='robots.page')),
            ],
            options={
                'db_table': 'robots_overrides',
                'ordering': ['-updated_at'],
            },
        ),
    ]
